"""
Label rasterization onto an RGB canvas.
"""

# Standard Library
import math

# PIP3 modules
import PIL.Image
import PIL.ImageDraw

# local repo modules
import image_grid_plotter as igp
import image_grid_plotter.config
import image_grid_plotter.fonts
import image_grid_plotter.numeric
import image_grid_plotter.text_metrics


FontPair = igp.fonts.FontPair
FontFace = igp.fonts.FontFace
LINE_SEPARATOR = igp.config.LINE_SEPARATOR


#============================================
def paste_color_bitmap(canvas: PIL.Image.Image, bitmap: PIL.Image.Image, x: int, y: int) -> None:
	"""
	Copy the visible pixels of a color bitmap onto the canvas.

	Pixels with any coverage replace the canvas pixel outright; fully
	transparent pixels are skipped. Parts outside the canvas are clipped.

	Args:
		canvas: Target image.
		bitmap: Source bitmap, any mode with alpha.
		x: Left edge on the canvas.
		y: Top edge on the canvas.
	"""
	rgba = bitmap.convert("RGBA")
	mask = rgba.getchannel("A").point(lambda value: 255 if value > 0 else 0)
	canvas.paste(rgba.convert(canvas.mode), (x, y), mask)


#============================================
def draw_outline_glyph(
	canvas: PIL.Image.Image,
	char: str,
	face: FontFace,
	x: int,
	baseline_y: int,
	point_size: float,
	color: tuple[int, int, int],
) -> None:
	"""
	Rasterize an outline glyph and blend it with the canvas.

	The coverage mask acts as alpha: each channel becomes
	old * (1 - a) + color * a, and zero coverage leaves the pixel alone.

	Args:
		canvas: Target image.
		char: Character to draw.
		face: Font face that owns the glyph.
		x: Pen position.
		baseline_y: Baseline position.
		point_size: Font size in pixels.
		color: Text color.
	"""
	font = face.pil_font(point_size)
	left, top, right, bottom = (int(value) for value in font.getbbox(char, anchor="ls"))
	if right <= left or bottom <= top:
		return
	mask = PIL.Image.new("L", (right - left, bottom - top), 0)
	PIL.ImageDraw.Draw(mask).text((-left, -top), char, font=font, fill=255, anchor="ls")
	canvas.paste(color, (x + left, baseline_y + top), mask)


#============================================
def draw_bitmap_glyph(
	canvas: PIL.Image.Image,
	char: str,
	face: FontFace,
	x: int,
	baseline_y: int,
	point_size: float,
) -> None:
	"""
	Render a color bitmap glyph at its native strike and copy it scaled.

	Args:
		canvas: Target image.
		char: Character to draw.
		face: Color bitmap font face.
		x: Pen position.
		baseline_y: Baseline position.
		point_size: Font size in pixels.
	"""
	native_size = face.bitmap_size
	font = face.pil_font(native_size)
	left, top, right, bottom = (int(value) for value in font.getbbox(char, mode="RGBA", anchor="ls"))
	if right <= left or bottom <= top:
		return
	bitmap = PIL.Image.new("RGBA", (right - left, bottom - top), (0, 0, 0, 0))
	PIL.ImageDraw.Draw(bitmap).text((-left, -top), char, font=font, anchor="ls", embedded_color=True)

	scale_factor = point_size / native_size
	scaled_width = max(1, igp.numeric.float_to_int(bitmap.width * scale_factor))
	scaled_height = max(1, igp.numeric.float_to_int(bitmap.height * scale_factor))
	if (scaled_width, scaled_height) != bitmap.size:
		bitmap = bitmap.resize((scaled_width, scaled_height), PIL.Image.Resampling.LANCZOS)
	paste_color_bitmap(
		canvas,
		bitmap,
		x + igp.numeric.float_to_int(left * scale_factor),
		baseline_y + igp.numeric.float_to_int(top * scale_factor),
	)


#============================================
def draw_text(
	canvas: PIL.Image.Image,
	text: str,
	x: int,
	y: int,
	point_size: float,
	fonts: FontPair,
	color: tuple[int, int, int],
) -> None:
	"""
	Draw one line of text with per-character font fallback.

	Args:
		canvas: Target image, modified in place.
		text: Single line of text.
		x: Left edge of the line.
		y: Top edge of the line box.
		point_size: Font size in pixels.
		fonts: Font pair.
		color: Color for outline glyphs; bitmap glyphs keep their own colors.
	"""
	# Pillow cannot rasterize a non-positive or non-finite size
	if not math.isfinite(point_size) or point_size <= 0:
		return
	baseline_y = y + igp.numeric.float_to_int(fonts.primary.ascent_px(point_size))
	cursor_x = igp.numeric.int_to_float_for_pos(x)
	for char in text:
		selection = fonts.select(char)
		face = selection.face
		advance = face.advance(selection.glyph_name, point_size)
		if not char.isspace():
			pen_x = igp.numeric.float_to_int(cursor_x)
			if face.has_color_bitmaps:
				draw_bitmap_glyph(canvas, char, face, pen_x, baseline_y, point_size)
			else:
				draw_outline_glyph(canvas, char, face, pen_x, baseline_y, point_size, color)
		cursor_x += advance


#============================================
def draw_multiline_text(
	canvas: PIL.Image.Image,
	text: str,
	x: int,
	y: int,
	point_size: float,
	fonts: FontPair,
	color: tuple[int, int, int],
) -> None:
	"""
	Draw text split on newlines, one line height apart.
	"""
	if not math.isfinite(point_size) or point_size <= 0:
		return
	line_height = igp.text_metrics.compute_line_height(point_size)
	for index, line in enumerate(text.split(LINE_SEPARATOR)):
		draw_text(canvas, line, x, y + index * line_height, point_size, fonts, color)
