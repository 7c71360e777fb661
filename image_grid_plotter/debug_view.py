"""
Flat rectangle rendering of a layout for visual diagnostics.
"""

# Standard Library
import pathlib

# PIP3 modules
import PIL.Image
import PIL.ImageDraw

# local repo modules
import image_grid_plotter as igp
import image_grid_plotter.config
import image_grid_plotter.layout


Layout = igp.layout.Layout
LayoutElement = igp.layout.LayoutElement
ImageElement = igp.layout.ImageElement
RowLabelElement = igp.layout.RowLabelElement
ColumnLabelElement = igp.layout.ColumnLabelElement
PaddingElement = igp.layout.PaddingElement


#============================================
def element_color(element: LayoutElement) -> tuple[int, int, int]:
	"""
	Pick the fill color for an element kind.

	Args:
		element: Layout element.

	Returns:
		RGB fill color.
	"""
	if isinstance(element, ImageElement):
		return igp.config.DEBUG_IMAGE_COLOR
	if isinstance(element, RowLabelElement):
		return igp.config.DEBUG_ROW_LABEL_COLOR
	if isinstance(element, ColumnLabelElement):
		return igp.config.DEBUG_COLUMN_LABEL_COLOR
	if isinstance(element, PaddingElement):
		return igp.config.DEBUG_PADDING_COLOR
	raise TypeError(f"Unknown layout element: {element!r}")


#============================================
def describe_element(element: LayoutElement) -> str:
	"""
	Describe an element in one line.

	Args:
		element: Layout element.

	Returns:
		Description like "Image: a.png" or "Row: label".
	"""
	if isinstance(element, ImageElement):
		return f"Image: {pathlib.Path(element.source_path).name}"
	if isinstance(element, RowLabelElement):
		return f"Row: {element.text}"
	if isinstance(element, ColumnLabelElement):
		return f"Col: {element.text}"
	if isinstance(element, PaddingElement):
		return f"Pad: {element.description}"
	raise TypeError(f"Unknown layout element: {element!r}")


#============================================
def render_debug(layout: Layout) -> PIL.Image.Image:
	"""
	Draw each layout element as a filled, bordered rectangle.

	Args:
		layout: Planned layout.

	Returns:
		RGB image the size of the layout canvas.
	"""
	canvas = PIL.Image.new("RGB", (layout.total_width, layout.total_height), igp.config.BACKGROUND_COLOR)
	draw = PIL.ImageDraw.Draw(canvas)
	for element in layout.elements:
		rect = element.rect
		if rect.width <= 0 or rect.height <= 0:
			continue
		draw.rectangle(
			[rect.x, rect.y, rect.right - 1, rect.bottom - 1],
			fill=element_color(element),
			outline=igp.config.DEBUG_BORDER_COLOR,
			width=1,
		)
	return canvas
