"""
Pytest configuration for local imports and shared font fixtures.
"""

# Standard Library
import io
import os
import pathlib
import sys

# PIP3 modules
import fontTools.fontBuilder
import fontTools.pens.ttGlyphPen
import fontTools.ttLib
import fontTools.ttLib.tables.sbixGlyph
import fontTools.ttLib.tables.sbixStrike
import PIL.Image
import pytest

#============================================


def _ensure_repo_on_path() -> None:
	"""
	Ensure the repository root is on sys.path.
	"""
	repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
	if repo_root not in sys.path:
		sys.path.insert(0, repo_root)


_ensure_repo_on_path()

# local repo modules
import image_grid_plotter as igp  # noqa: E402
import image_grid_plotter.fonts  # noqa: E402


UNITS_PER_EM = 1000
ADVANCE = 600
BOX_LEFT = 50
BOX_RIGHT = 550
BOX_TOP = 700
ASCENT = 800
DESCENT = -200

TEST_FONT_SIZE = 40.0
IMAGE_GRAY = (200, 200, 200)
BITMAP_STRIKE_PPEM = 100
BITMAP_GLYPH_COLOR = (255, 0, 0, 255)
BITMAP_TEXT = "\U0001f600\U0001f680"

PRIMARY_TEXT = (
	"ABCDEFGHIJKLMNOPQRSTUVWXYZ"
	"abcdefghijklmnopqrstuvwxyz"
	"0123456789"
	"#.,:;!?-_()/'\"&@+"
	"©®™"
)
# mapped in the primary font but drawn with no contours
PRIMARY_EMPTY_TEXT = "❤"
FALLBACK_TEXT = (
	"\U0001f600\U0001f60e\U0001f680\U0001f6f8\U0001f308\U0001f3a8"
	"\U0001f916\U0001f984\U0001fa77\U0001fac2\U0001f44b\U0001f30d"
	"❤"
)


#============================================
def _glyph_name(char: str) -> str:
	"""
	Build a production-style glyph name for a character.
	"""
	codepoint = ord(char)
	if codepoint > 0xFFFF:
		return f"u{codepoint:X}"
	return f"uni{codepoint:04X}"


#============================================
def _box_glyph():
	"""
	Draw a solid rectangle glyph.
	"""
	pen = fontTools.pens.ttGlyphPen.TTGlyphPen(None)
	pen.moveTo((BOX_LEFT, 0))
	pen.lineTo((BOX_LEFT, BOX_TOP))
	pen.lineTo((BOX_RIGHT, BOX_TOP))
	pen.lineTo((BOX_RIGHT, 0))
	pen.closePath()
	return pen.glyph()


#============================================
def _empty_glyph():
	"""
	Build a glyph with no contours.
	"""
	pen = fontTools.pens.ttGlyphPen.TTGlyphPen(None)
	return pen.glyph()


#============================================
def build_box_font(path: pathlib.Path, family: str, box_text: str, empty_text: str = "") -> pathlib.Path:
	"""
	Write a TrueType font whose glyphs are solid boxes.

	Args:
		path: Output .ttf path.
		family: Family name for the name table.
		box_text: Characters that get a box outline.
		empty_text: Characters mapped to a glyph without contours.

	Returns:
		The font path.
	"""
	glyph_order = [".notdef", "space"]
	cmap = {ord(" "): "space"}
	glyphs = {".notdef": _box_glyph(), "space": _empty_glyph()}
	metrics = {".notdef": (ADVANCE, BOX_LEFT), "space": (ADVANCE, 0)}
	for char in box_text:
		name = _glyph_name(char)
		if name in glyphs:
			continue
		glyph_order.append(name)
		cmap[ord(char)] = name
		glyphs[name] = _box_glyph()
		metrics[name] = (ADVANCE, BOX_LEFT)
	for char in empty_text:
		name = _glyph_name(char)
		glyph_order.append(name)
		cmap[ord(char)] = name
		glyphs[name] = _empty_glyph()
		metrics[name] = (ADVANCE, 0)

	builder = fontTools.fontBuilder.FontBuilder(UNITS_PER_EM, isTTF=True)
	builder.setupGlyphOrder(glyph_order)
	builder.setupCharacterMap(cmap)
	builder.setupGlyf(glyphs)
	builder.setupHorizontalMetrics(metrics)
	builder.setupHorizontalHeader(ascent=ASCENT, descent=DESCENT)
	builder.setupNameTable({"familyName": family, "styleName": "Regular"})
	builder.setupOS2(sTypoAscender=ASCENT, sTypoDescender=DESCENT, usWinAscent=ASCENT, usWinDescent=-DESCENT)
	builder.setupPost()
	builder.save(str(path))
	return path


#============================================
def build_bitmap_font(path: pathlib.Path, family: str, bitmap_text: str) -> pathlib.Path:
	"""
	Write a color bitmap font with one sbix strike of solid squares.

	Each character gets a square PNG that fills the whole em at the strike
	size and sits on the baseline.

	Args:
		path: Output .ttf path.
		family: Family name for the name table.
		bitmap_text: Characters that get a bitmap.

	Returns:
		The font path.
	"""
	glyph_order = [".notdef", "space"]
	cmap = {ord(" "): "space"}
	for char in bitmap_text:
		name = _glyph_name(char)
		glyph_order.append(name)
		cmap[ord(char)] = name

	builder = fontTools.fontBuilder.FontBuilder(UNITS_PER_EM, isTTF=True)
	builder.setupGlyphOrder(glyph_order)
	builder.setupCharacterMap(cmap)
	builder.setupGlyf({name: _empty_glyph() for name in glyph_order})
	builder.setupHorizontalMetrics({name: (ADVANCE, 0) for name in glyph_order})
	builder.setupHorizontalHeader(ascent=ASCENT, descent=DESCENT)
	builder.setupNameTable({"familyName": family, "styleName": "Regular"})
	builder.setupOS2(sTypoAscender=ASCENT, sTypoDescender=DESCENT, usWinAscent=ASCENT, usWinDescent=-DESCENT)
	builder.setupPost()

	buffer = io.BytesIO()
	PIL.Image.new("RGBA", (BITMAP_STRIKE_PPEM, BITMAP_STRIKE_PPEM), BITMAP_GLYPH_COLOR).save(buffer, "PNG")
	png_data = buffer.getvalue()
	strike = fontTools.ttLib.tables.sbixStrike.Strike(ppem=BITMAP_STRIKE_PPEM, resolution=72)
	for name in glyph_order[2:]:
		strike.glyphs[name] = fontTools.ttLib.tables.sbixGlyph.Glyph(
			glyphName=name,
			graphicType="png ",
			originOffsetX=0,
			originOffsetY=0,
			imageData=png_data,
		)
	sbix = fontTools.ttLib.newTable("sbix")
	sbix.version = 1
	sbix.flags = 1
	sbix.strikes = {BITMAP_STRIKE_PPEM: strike}
	builder.font["sbix"] = sbix
	builder.save(str(path))
	return path


#============================================
def write_solid_image(
	path: pathlib.Path,
	size: tuple[int, int],
	color: tuple[int, int, int] = IMAGE_GRAY,
) -> pathlib.Path:
	"""
	Write a single-color RGB image.

	Args:
		path: Output path; the extension picks the format.
		size: (width, height).
		color: Fill color.

	Returns:
		The image path.
	"""
	PIL.Image.new("RGB", size, color).save(path)
	return path


#============================================
@pytest.fixture(scope="session")
def font_dir(tmp_path_factory: pytest.TempPathFactory) -> pathlib.Path:
	"""
	Directory holding the generated test fonts.
	"""
	return tmp_path_factory.mktemp("fonts")


#============================================
@pytest.fixture(scope="session")
def primary_font_path(font_dir: pathlib.Path) -> pathlib.Path:
	"""
	Primary test font with Latin boxes and an empty heart glyph.
	"""
	return build_box_font(font_dir / "GridTestSans.ttf", "GridTestSans", PRIMARY_TEXT, PRIMARY_EMPTY_TEXT)


#============================================
@pytest.fixture(scope="session")
def fallback_font_path(font_dir: pathlib.Path) -> pathlib.Path:
	"""
	Fallback test font with emoji boxes.
	"""
	return build_box_font(font_dir / "GridTestEmoji.ttf", "GridTestEmoji", FALLBACK_TEXT)


#============================================
@pytest.fixture(scope="session")
def font_pair(primary_font_path: pathlib.Path, fallback_font_path: pathlib.Path) -> igp.fonts.FontPair:
	"""
	Loaded font pair built from the generated test fonts.
	"""
	return igp.fonts.load_fonts(primary_font_path, fallback_font_path)


#============================================
@pytest.fixture
def image_factory(tmp_path: pathlib.Path):
	"""
	Factory writing solid test images into tmp_path.
	"""

	def _make(name: str, size: tuple[int, int], color: tuple[int, int, int] = IMAGE_GRAY) -> pathlib.Path:
		return write_solid_image(tmp_path / name, size, color)

	return _make


#============================================
@pytest.fixture(scope="session")
def bitmap_font_path(font_dir: pathlib.Path) -> pathlib.Path:
	"""
	Color bitmap test font with red square emoji.
	"""
	return build_bitmap_font(font_dir / "GridTestColorEmoji.ttf", "GridTestColorEmoji", BITMAP_TEXT)


#============================================
@pytest.fixture(scope="session")
def bitmap_font_pair(primary_font_path: pathlib.Path, bitmap_font_path: pathlib.Path) -> igp.fonts.FontPair:
	"""
	Font pair whose fallback is the color bitmap test font.
	"""
	return igp.fonts.load_fonts(primary_font_path, bitmap_font_path)
