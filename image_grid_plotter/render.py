"""
Grid compositing: decode images, plan the layout, draw, and save.
"""

# Standard Library
import pathlib

# PIP3 modules
import PIL.Image

# local repo modules
import image_grid_plotter as igp
import image_grid_plotter.config
import image_grid_plotter.debug_view
import image_grid_plotter.draw_text
import image_grid_plotter.fonts
import image_grid_plotter.image_io
import image_grid_plotter.layout


PlotConfig = igp.config.PlotConfig
PlotResult = igp.config.PlotResult
FontPair = igp.fonts.FontPair
Layout = igp.layout.Layout
ImageElement = igp.layout.ImageElement
RowLabelElement = igp.layout.RowLabelElement
ColumnLabelElement = igp.layout.ColumnLabelElement
PaddingElement = igp.layout.PaddingElement

BACKGROUND_COLOR = igp.config.BACKGROUND_COLOR
TEXT_COLOR = igp.config.TEXT_COLOR


#============================================
def resolve_fonts(config: PlotConfig, fonts: FontPair | None = None) -> FontPair | None:
	"""
	Pick the font pair for a plot.

	Args:
		config: Plot configuration.
		fonts: Font pair supplied by the caller.

	Returns:
		FontPair, or None when the plot has no labels.
	"""
	if fonts is not None:
		return fonts
	if not config.has_labels():
		return None
	if config.font_path is not None or config.emoji_font_path is not None:
		return igp.fonts.load_fonts(config.font_path, config.emoji_font_path)
	return igp.fonts.default_fonts()


#============================================
def load_images(paths: list[pathlib.Path]) -> dict[str, PIL.Image.Image]:
	"""
	Decode every source image once.

	Args:
		paths: Image paths.

	Returns:
		Map of str(path) to RGB image.
	"""
	images: dict[str, PIL.Image.Image] = {}
	for path in paths:
		key = str(path)
		if key not in images:
			images[key] = igp.image_io.open_image(path)
	return images


#============================================
def compose_plot(
	layout: Layout,
	images: dict[str, PIL.Image.Image],
	point_size: float,
	fonts: FontPair | None,
) -> PIL.Image.Image:
	"""
	Draw a planned layout onto a white canvas.

	Args:
		layout: Planned layout.
		images: Decoded images keyed by source path.
		point_size: Label font size in pixels.
		fonts: Font pair, needed when the layout has labels.

	Returns:
		RGB canvas.
	"""
	canvas = PIL.Image.new("RGB", (layout.total_width, layout.total_height), BACKGROUND_COLOR)
	for element in layout.elements:
		if isinstance(element, ImageElement):
			canvas.paste(images[element.source_path], (element.rect.x, element.rect.y))
		elif isinstance(element, (RowLabelElement, ColumnLabelElement)):
			igp.draw_text.draw_multiline_text(
				canvas,
				element.text,
				element.rect.x,
				element.rect.y,
				point_size,
				fonts,
				TEXT_COLOR,
			)
		elif not isinstance(element, PaddingElement):
			raise TypeError(f"Unknown layout element: {element!r}")
	return canvas


#============================================
def create_plot(config: PlotConfig, fonts: FontPair | None = None) -> PlotResult:
	"""
	Build the labeled image grid and write it to config.output.

	In debug mode a rectangle view of the layout is also written next to
	the output with "_debug" appended to the file stem.

	Args:
		config: Plot configuration.
		fonts: Optional preloaded font pair.

	Returns:
		PlotResult describing the written files.
	"""
	columns = igp.layout.validate_plot_config(config)
	images = load_images(config.images)
	image_sizes = [images[str(path)].size for path in config.images]
	fonts = resolve_fonts(config, fonts)
	layout = igp.layout.plan_layout(config, image_sizes, fonts)

	output_path = pathlib.Path(config.output)
	debug_path = None
	if config.debug_mode:
		debug_path = igp.config.build_debug_output_path(output_path)
		debug_image = igp.debug_view.render_debug(layout)
		igp.image_io.save_image(debug_image, debug_path)
		print(f"Debug layout written: {debug_path}")
		print(
			f"Layout: {len(layout.elements_of_type(ImageElement))} images,"
			f" {len(layout.elements_of_type(RowLabelElement))} row labels,"
			f" {len(layout.elements_of_type(ColumnLabelElement))} column labels,"
			f" {len(layout.elements_of_type(PaddingElement))} padding bands"
		)
		for element in layout.elements:
			print(f"  {igp.debug_view.describe_element(element)}")

	canvas = compose_plot(layout, images, config.resolved_font_size(), fonts)
	igp.image_io.save_image(canvas, output_path)

	return PlotResult(
		output_path=output_path,
		debug_path=debug_path,
		width=layout.total_width,
		height=layout.total_height,
		image_count=len(config.images),
		columns=columns,
	)
