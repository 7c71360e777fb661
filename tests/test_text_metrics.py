import pytest

import image_grid_plotter as igp
import image_grid_plotter.text_metrics


POINT_SIZE = 40.0


#============================================
def test_single_line_width(font_pair) -> None:
	"""
	Width is the sum of scaled advances.
	"""
	width, height = igp.text_metrics.measure_label("AB", font_pair, POINT_SIZE)
	assert width == pytest.approx(48.0)
	assert height == 40


#============================================
def test_multiline_uses_widest_line(font_pair) -> None:
	"""
	Width comes from the widest line and height from the line count.
	"""
	width, height = igp.text_metrics.measure_label("A\nBCD", font_pair, POINT_SIZE)
	assert width == pytest.approx(72.0)
	assert height == 80


#============================================
def test_empty_label_measures_zero(font_pair) -> None:
	"""
	Empty text has no size.
	"""
	assert igp.text_metrics.measure_label("", font_pair, POINT_SIZE) == (0.0, 0)


#============================================
def test_mixed_emoji_label_counts_fallback_advance(font_pair) -> None:
	"""
	Emoji advances come from the fallback font.
	"""
	width, _height = igp.text_metrics.measure_label("A\U0001f600", font_pair, POINT_SIZE)
	assert width == pytest.approx(48.0)


#============================================
def test_measure_labels_takes_maximum(font_pair) -> None:
	"""
	Label sets report the widest width and tallest height.
	"""
	width, height = igp.text_metrics.measure_labels(["ABC", "A\nB\nC"], font_pair, POINT_SIZE)
	assert width == pytest.approx(72.0)
	assert height == 120
	assert igp.text_metrics.measure_labels([], font_pair, POINT_SIZE) == (0.0, 0)


#============================================
def test_line_height_follows_point_size() -> None:
	"""
	Line height is the point size rounded to whole pixels.
	"""
	assert igp.text_metrics.compute_line_height(40.0) == 40
	assert igp.text_metrics.compute_line_height(12.6) == 13
