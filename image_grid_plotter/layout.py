"""
Grid layout planning for labeled image plots.
"""

# Standard Library
import dataclasses
import math

# local repo modules
import image_grid_plotter as igp
import image_grid_plotter.config
import image_grid_plotter.fonts
import image_grid_plotter.numeric
import image_grid_plotter.text_metrics


PlotConfig = igp.config.PlotConfig
PlotConfigError = igp.config.PlotConfigError
LabelAlignment = igp.config.LabelAlignment
FontPair = igp.fonts.FontPair

LABEL_PADDING = igp.config.LABEL_PADDING
ROW_LABEL_INSET = igp.config.ROW_LABEL_INSET
U32_MAX = igp.numeric.U32_MAX


@dataclasses.dataclass(frozen=True)
class Rect:
	x: int
	y: int
	width: int
	height: int

	#============================================
	@property
	def right(self) -> int:
		return self.x + self.width

	#============================================
	@property
	def bottom(self) -> int:
		return self.y + self.height


@dataclasses.dataclass(frozen=True)
class ImageElement:
	rect: Rect
	source_path: str


@dataclasses.dataclass(frozen=True)
class RowLabelElement:
	rect: Rect
	text: str


@dataclasses.dataclass(frozen=True)
class ColumnLabelElement:
	rect: Rect
	text: str


@dataclasses.dataclass(frozen=True)
class PaddingElement:
	rect: Rect
	description: str


LayoutElement = ImageElement | RowLabelElement | ColumnLabelElement | PaddingElement


@dataclasses.dataclass
class Layout:
	total_width: int
	total_height: int
	elements: list[LayoutElement] = dataclasses.field(default_factory=list)

	#============================================
	def add_element(self, element: LayoutElement) -> None:
		"""
		Append an element to the draw order.
		"""
		self.elements.append(element)

	#============================================
	def elements_of_type(self, element_type: type) -> list[LayoutElement]:
		"""
		Return the elements of one kind, in draw order.
		"""
		return [element for element in self.elements if isinstance(element, element_type)]


#============================================
def compute_columns(image_count: int, rows: int) -> int:
	"""
	Compute the column count for row-major filling.

	Args:
		image_count: Number of images.
		rows: Number of rows, at least 1.

	Returns:
		ceil(image_count / rows).
	"""
	return (image_count + rows - 1) // rows


#============================================
def validate_plot_config(config: PlotConfig, image_count: int | None = None) -> int:
	"""
	Check the grid shape, label counts and font size.

	Args:
		config: Plot configuration.
		image_count: Image count override, defaults to len(config.images).

	Returns:
		Column count.
	"""
	if image_count is None:
		image_count = len(config.images)
	if config.rows < 1:
		raise PlotConfigError(f"Number of rows ({config.rows}) must be at least 1")
	font_size = config.resolved_font_size()
	if not math.isfinite(font_size) or font_size <= 0:
		raise PlotConfigError(f"Font size ({font_size}) must be a finite number greater than 0")
	if image_count > U32_MAX:
		raise PlotConfigError(f"Too many images ({image_count}), the limit is {U32_MAX}")
	if image_count == 0:
		raise PlotConfigError("Number of images (0) must be at least 1")
	if config.row_labels and len(config.row_labels) != config.rows:
		raise PlotConfigError(
			f"Number of row labels ({len(config.row_labels)}) should match the number of rows ({config.rows})"
		)
	columns = compute_columns(image_count, config.rows)
	if config.column_labels and len(config.column_labels) != columns:
		raise PlotConfigError(
			f"Number of column labels ({len(config.column_labels)}) should match the number of columns ({columns})"
		)
	return columns


#============================================
def find_max_dimensions(image_sizes: list[tuple[int, int]]) -> tuple[int, int]:
	"""
	Find the cell size shared by every grid cell.

	Args:
		image_sizes: (width, height) per image.

	Returns:
		Tuple of (max_width, max_height).
	"""
	max_width = 0
	max_height = 0
	for width, height in image_sizes:
		max_width = max(max_width, width)
		max_height = max(max_height, height)
	return (max_width, max_height)


#============================================
def compute_label_offset(available: int, label_width: int, alignment: LabelAlignment) -> int:
	"""
	Compute a label offset inside an available span.

	Args:
		available: Span width in pixels.
		label_width: Label width in pixels.
		alignment: Label alignment.

	Returns:
		Offset from the span start; negative when the label is wider.
	"""
	if alignment is LabelAlignment.START:
		return 0
	if alignment is LabelAlignment.END:
		return available - label_width
	# truncate toward zero so wide labels overhang both sides evenly
	return int((available - label_width) / 2)


#============================================
def plan_layout(
	config: PlotConfig,
	image_sizes: list[tuple[int, int]],
	fonts: FontPair | None = None,
) -> Layout:
	"""
	Place every image and label on the canvas.

	Cells share the size of the largest image. The left band grows to fit
	the widest row label and the top band to fit the tallest column label;
	both collapse to zero without labels.

	Args:
		config: Plot configuration.
		image_sizes: (width, height) per image, in config.images order.
		fonts: Font pair, required only when labels are present.

	Returns:
		Layout with elements in draw order.
	"""
	columns = validate_plot_config(config, len(image_sizes))
	if config.has_labels() and fonts is None:
		raise PlotConfigError("Labels require a font pair for measurement")
	point_size = config.resolved_font_size()
	max_width, max_height = find_max_dimensions(image_sizes)

	left_padding = 0
	if config.row_labels:
		row_label_width, _row_label_height = igp.text_metrics.measure_labels(config.row_labels, fonts, point_size)
		left_padding = max(config.left_padding, igp.numeric.ceil_to_unsigned(row_label_width) + LABEL_PADDING)

	top_padding = 0
	if config.column_labels:
		_column_label_width, column_label_height = igp.text_metrics.measure_labels(
			config.column_labels,
			fonts,
			point_size,
		)
		top_padding = max(config.top_padding, column_label_height + LABEL_PADDING)

	row_height = max_height + top_padding
	canvas_width = max_width * columns + left_padding
	canvas_height = row_height * config.rows + top_padding
	layout = Layout(total_width=canvas_width, total_height=canvas_height)

	if left_padding > 0:
		layout.add_element(
			PaddingElement(
				rect=Rect(0, 0, left_padding, canvas_height),
				description="Left padding for row labels",
			)
		)
	if top_padding > 0:
		layout.add_element(
			PaddingElement(
				rect=Rect(left_padding, 0, canvas_width - left_padding, top_padding),
				description="Top padding for column labels",
			)
		)

	for col, label in enumerate(config.column_labels):
		image_width = image_sizes[col][0]
		cell_start = col * max_width + left_padding
		x_offset = (max_width - image_width) // 2
		label_width, label_height = igp.text_metrics.measure_label(label, fonts, point_size)
		label_width_px = igp.numeric.float_to_int(label_width)
		label_x = cell_start + x_offset + compute_label_offset(
			image_width,
			label_width_px,
			config.column_label_alignment,
		)
		label_y = top_padding // 2 - label_height // 2
		layout.add_element(
			ColumnLabelElement(
				rect=Rect(label_x, label_y, igp.numeric.int_to_unsigned(label_width_px), label_height),
				text=label,
			)
		)

	available_width = max(0, left_padding - LABEL_PADDING)
	for index, (image_width, image_height) in enumerate(image_sizes):
		row = index // columns
		col = index % columns
		x_start = col * max_width + left_padding
		y_start = row * row_height + top_padding

		if col == 0 and row < len(config.row_labels):
			row_label = config.row_labels[row]
			label_width, label_height = igp.text_metrics.measure_label(row_label, fonts, point_size)
			label_width_px = igp.numeric.float_to_int(label_width)
			label_x = ROW_LABEL_INSET + compute_label_offset(
				available_width,
				label_width_px,
				config.row_label_alignment,
			)
			label_y = y_start + max_height // 2 - label_height // 2
			layout.add_element(
				RowLabelElement(
					rect=Rect(label_x, label_y, igp.numeric.int_to_unsigned(label_width_px), label_height),
					text=row_label,
				)
			)

		x_offset = (max_width - image_width) // 2
		y_offset = (max_height - image_height) // 2
		layout.add_element(
			ImageElement(
				rect=Rect(x_start + x_offset, y_start + y_offset, image_width, image_height),
				source_path=str(config.images[index]) if index < len(config.images) else "",
			)
		)

	return layout
