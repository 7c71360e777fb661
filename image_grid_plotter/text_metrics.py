"""
Label measurement used to size the padding bands.
"""

# local repo modules
import image_grid_plotter as igp
import image_grid_plotter.config
import image_grid_plotter.fonts
import image_grid_plotter.numeric


FontPair = igp.fonts.FontPair
LINE_SEPARATOR = igp.config.LINE_SEPARATOR


#============================================
def compute_line_height(point_size: float) -> int:
	"""
	Compute the pixel height of one label line.

	Args:
		point_size: Font size in pixels.

	Returns:
		Line height in whole pixels.
	"""
	return igp.numeric.float_to_unsigned(point_size)


#============================================
def measure_line_width(line: str, fonts: FontPair, point_size: float) -> float:
	"""
	Sum the advances of a single line.

	Each character is resolved separately since a line may mix
	scripts and emoji.

	Args:
		line: Text without line breaks.
		fonts: Font pair.
		point_size: Font size in pixels.

	Returns:
		Width in pixels.
	"""
	width = 0.0
	for char in line:
		selection = fonts.select(char)
		width += selection.face.advance(selection.glyph_name, point_size)
	return width


#============================================
def measure_label(text: str, fonts: FontPair, point_size: float) -> tuple[float, int]:
	"""
	Measure a possibly multi-line label.

	Args:
		text: Label text, lines separated by newline.
		fonts: Font pair.
		point_size: Font size in pixels.

	Returns:
		Tuple of (width, height); (0.0, 0) for empty text.
	"""
	if not text:
		return (0.0, 0)
	lines = text.split(LINE_SEPARATOR)
	max_width = max(measure_line_width(line, fonts, point_size) for line in lines)
	total_height = compute_line_height(point_size) * len(lines)
	return (max_width, total_height)


#============================================
def measure_labels(labels: list[str], fonts: FontPair, point_size: float) -> tuple[float, int]:
	"""
	Find the largest width and height over a set of labels.

	Args:
		labels: Label texts.
		fonts: Font pair.
		point_size: Font size in pixels.

	Returns:
		Tuple of (max_width, max_height); (0.0, 0) when there are no labels.
	"""
	max_width = 0.0
	max_height = 0
	for label in labels:
		width, height = measure_label(label, fonts, point_size)
		max_width = max(max_width, width)
		max_height = max(max_height, height)
	return (max_width, max_height)
