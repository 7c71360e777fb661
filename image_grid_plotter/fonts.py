"""
Font loading and per-character font selection.
"""

# Standard Library
import dataclasses
import enum
import functools
import os
import pathlib
import struct

# PIP3 modules
import fontTools.pens.boundsPen
import fontTools.ttLib
import PIL.ImageFont


PRIMARY_FONT_ENV = "IMAGE_GRID_FONT"
FALLBACK_FONT_ENV = "IMAGE_GRID_EMOJI_FONT"

ASSETS_DIR = pathlib.Path(__file__).resolve().parent / "assets"
PRIMARY_FONT_NAME = "DejaVuSans.ttf"
FALLBACK_FONT_NAME = "NotoColorEmoji.ttf"

PRIMARY_FONT_CANDIDATES = [
	pathlib.Path("/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"),
	pathlib.Path("/usr/share/fonts/TTF/DejaVuSans.ttf"),
	pathlib.Path("/usr/share/fonts/dejavu/DejaVuSans.ttf"),
	pathlib.Path("/usr/share/fonts/dejavu-sans-fonts/DejaVuSans.ttf"),
	pathlib.Path("/Library/Fonts/DejaVuSans.ttf"),
]
FALLBACK_FONT_CANDIDATES = [
	pathlib.Path("/usr/share/fonts/truetype/noto/NotoColorEmoji.ttf"),
	pathlib.Path("/usr/share/fonts/noto/NotoColorEmoji.ttf"),
	pathlib.Path("/usr/share/fonts/google-noto-emoji/NotoColorEmoji.ttf"),
	pathlib.Path("/usr/share/fonts/noto-emoji/NotoColorEmoji.ttf"),
	pathlib.Path("/System/Library/Fonts/Apple Color Emoji.ttc"),
]

NOTDEF_GLYPH = ".notdef"


class FontLoadError(RuntimeError):
	"""
	Raised when a font file is missing or cannot be parsed.
	"""


class FontRole(enum.Enum):
	PRIMARY = "primary"
	FALLBACK = "fallback"


@dataclasses.dataclass
class FontFace:
	role: FontRole
	path: pathlib.Path
	ttfont: fontTools.ttLib.TTFont
	cmap: dict[int, str]
	units_per_em: int
	ascent: int
	descent: int
	bitmap_size: int | None = None
	_outline_cache: dict[str, bool] = dataclasses.field(default_factory=dict, repr=False)
	_pil_cache: dict[float, PIL.ImageFont.FreeTypeFont] = dataclasses.field(default_factory=dict, repr=False)

	#============================================
	@property
	def has_color_bitmaps(self) -> bool:
		"""
		True when glyphs come from an embedded color bitmap strike.
		"""
		return self.bitmap_size is not None

	#============================================
	def glyph_name(self, char: str) -> str:
		"""
		Map a character to a glyph name, .notdef when unmapped.
		"""
		return self.cmap.get(ord(char), NOTDEF_GLYPH)

	#============================================
	def glyph_id(self, glyph_name: str) -> int:
		"""
		Map a glyph name to its glyph id.
		"""
		return self.ttfont.getGlyphID(glyph_name)

	#============================================
	def has_outline(self, glyph_name: str) -> bool:
		"""
		Check whether a glyph has drawable outline contours.

		Args:
			glyph_name: Glyph name.

		Returns:
			True if the glyph draws at least one point.
		"""
		if glyph_name in self._outline_cache:
			return self._outline_cache[glyph_name]
		result = False
		if "glyf" in self.ttfont or "CFF " in self.ttfont or "CFF2" in self.ttfont:
			glyph_set = self.ttfont.getGlyphSet()
			if glyph_name in glyph_set:
				pen = fontTools.pens.boundsPen.BoundsPen(glyph_set)
				glyph_set[glyph_name].draw(pen)
				result = pen.bounds is not None
		self._outline_cache[glyph_name] = result
		return result

	#============================================
	def advance(self, glyph_name: str, point_size: float) -> float:
		"""
		Horizontal advance of a glyph in pixels.

		Args:
			glyph_name: Glyph name.
			point_size: Pixel size of the em square.

		Returns:
			Scaled advance width.
		"""
		metrics = self.ttfont["hmtx"].metrics
		advance_units = metrics.get(glyph_name, metrics.get(NOTDEF_GLYPH, (0, 0)))[0]
		return advance_units * point_size / self.units_per_em

	#============================================
	def ascent_px(self, point_size: float) -> float:
		"""
		Scaled ascender height in pixels.
		"""
		return self.ascent * point_size / self.units_per_em

	#============================================
	def pil_font(self, size: float) -> PIL.ImageFont.FreeTypeFont:
		"""
		Return a cached Pillow font object for a pixel size.

		Args:
			size: Pixel size; color bitmap faces only load at their strike size.

		Returns:
			Pillow FreeTypeFont.
		"""
		if size not in self._pil_cache:
			try:
				self._pil_cache[size] = PIL.ImageFont.truetype(
					str(self.path),
					size,
					layout_engine=PIL.ImageFont.Layout.BASIC,
				)
			except OSError as error:
				raise FontLoadError(f"Failed to load {self.role.value} font {self.path} at size {size}") from error
		return self._pil_cache[size]


@dataclasses.dataclass(frozen=True)
class GlyphSelection:
	glyph_id: int
	glyph_name: str
	face: FontFace


@dataclasses.dataclass(frozen=True)
class FontPair:
	primary: FontFace
	fallback: FontFace

	#============================================
	def role_for_char(self, char: str) -> FontRole:
		"""
		Decide which font renders a character.

		Args:
			char: Single character.

		Returns:
			FontRole.PRIMARY if the primary font has a real glyph for it.
		"""
		glyph_name = self.primary.glyph_name(char)
		if glyph_name == NOTDEF_GLYPH:
			return FontRole.FALLBACK
		if char.isspace() or self.primary.has_outline(glyph_name):
			return FontRole.PRIMARY
		return FontRole.FALLBACK

	#============================================
	def face_for_role(self, role: FontRole) -> FontFace:
		"""
		Return the face that plays a role.
		"""
		if role is FontRole.PRIMARY:
			return self.primary
		return self.fallback

	#============================================
	def select(self, char: str) -> GlyphSelection:
		"""
		Resolve the glyph and font used to draw a character.

		Args:
			char: Single character.

		Returns:
			GlyphSelection with glyph id, glyph name and face.
		"""
		face = self.face_for_role(self.role_for_char(char))
		glyph_name = face.glyph_name(char)
		return GlyphSelection(glyph_id=face.glyph_id(glyph_name), glyph_name=glyph_name, face=face)


#============================================
def find_bitmap_size(ttfont: fontTools.ttLib.TTFont) -> int | None:
	"""
	Find the native strike size of a color bitmap font.

	Args:
		ttfont: Parsed font.

	Returns:
		Pixels per em of the largest strike, or None for outline fonts.
	"""
	if "CBLC" in ttfont:
		sizes = [strike.bitmapSizeTable.ppemY for strike in ttfont["CBLC"].strikes]
		if sizes:
			return max(sizes)
	if "sbix" in ttfont:
		sizes = list(ttfont["sbix"].strikes.keys())
		if sizes:
			return max(sizes)
	return None


#============================================
def load_font_face(path: pathlib.Path, role: FontRole) -> FontFace:
	"""
	Parse a font file.

	Args:
		path: Font file path (.ttf, .otf or .ttc).
		role: Role the font plays in the pair.

	Returns:
		FontFace.
	"""
	path = pathlib.Path(path)
	if not path.is_file():
		raise FontLoadError(f"{role.value.capitalize()} font not found: {path}")
	try:
		if path.suffix.lower() == ".ttc":
			ttfont = fontTools.ttLib.TTFont(str(path), fontNumber=0, lazy=True)
		else:
			ttfont = fontTools.ttLib.TTFont(str(path), lazy=True)
		cmap = ttfont.getBestCmap()
		units_per_em = ttfont["head"].unitsPerEm
		hhea = ttfont["hhea"]
		ascent = hhea.ascent
		descent = hhea.descent
		advance_count = len(ttfont["hmtx"].metrics)
		bitmap_size = find_bitmap_size(ttfont)
	except (fontTools.ttLib.TTLibError, KeyError, AttributeError, OSError, ValueError, struct.error) as error:
		raise FontLoadError(f"Failed to load {role.value} font: {path}") from error
	if cmap is None or advance_count == 0:
		raise FontLoadError(f"{role.value.capitalize()} font has no usable cmap or metrics: {path}")
	return FontFace(
		role=role,
		path=path,
		ttfont=ttfont,
		cmap=dict(cmap),
		units_per_em=units_per_em,
		ascent=ascent,
		descent=descent,
		bitmap_size=bitmap_size,
	)


#============================================
def find_font_file(
	explicit: pathlib.Path | None,
	env_name: str,
	asset_name: str,
	candidates: list[pathlib.Path],
) -> pathlib.Path | None:
	"""
	Locate a font file.

	Args:
		explicit: Path given by the caller.
		env_name: Environment variable consulted next.
		asset_name: File name inside the package assets directory.
		candidates: System locations tried last.

	Returns:
		First path found, the explicit path as given, or None.
	"""
	if explicit is not None:
		return pathlib.Path(explicit)
	env_value = os.environ.get(env_name)
	if env_value:
		return pathlib.Path(env_value)
	asset_path = ASSETS_DIR / asset_name
	if asset_path.is_file():
		return asset_path
	for candidate in candidates:
		if candidate.is_file():
			return candidate
	return None


#============================================
def load_fonts(
	primary_path: pathlib.Path | None = None,
	fallback_path: pathlib.Path | None = None,
) -> FontPair:
	"""
	Load the primary and fallback fonts.

	Args:
		primary_path: Optional primary font path.
		fallback_path: Optional fallback (emoji) font path.

	Returns:
		FontPair.
	"""
	primary_file = find_font_file(primary_path, PRIMARY_FONT_ENV, PRIMARY_FONT_NAME, PRIMARY_FONT_CANDIDATES)
	if primary_file is None:
		raise FontLoadError(
			f"No primary font found; set {PRIMARY_FONT_ENV} or place {PRIMARY_FONT_NAME} in {ASSETS_DIR}"
		)
	fallback_file = find_font_file(fallback_path, FALLBACK_FONT_ENV, FALLBACK_FONT_NAME, FALLBACK_FONT_CANDIDATES)
	if fallback_file is None:
		# emoji then draw as the primary font's .notdef box
		print(
			f"Warning: no emoji font found; set {FALLBACK_FONT_ENV} or place {FALLBACK_FONT_NAME} in {ASSETS_DIR}."
			" Using the primary font for fallback glyphs."
		)
		fallback_file = primary_file
	return FontPair(
		primary=load_font_face(primary_file, FontRole.PRIMARY),
		fallback=load_font_face(fallback_file, FontRole.FALLBACK),
	)


#============================================
@functools.cache
def default_fonts() -> FontPair:
	"""
	Load the default font pair once per process.
	"""
	return load_fonts()
