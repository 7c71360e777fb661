"""
Shared configuration and constants.
"""

# Standard Library
import dataclasses
import enum
import json
import pathlib


DEFAULT_TOP_PADDING = 40
DEFAULT_LEFT_PADDING = 40
DEFAULT_FONT_SIZE = 40.0
DEFAULT_OUTPUT = "output.jpg"

LABEL_PADDING = 20
ROW_LABEL_INSET = 10

BACKGROUND_COLOR = (255, 255, 255)
TEXT_COLOR = (0, 0, 0)

DEBUG_IMAGE_COLOR = (200, 200, 255)
DEBUG_ROW_LABEL_COLOR = (255, 200, 200)
DEBUG_COLUMN_LABEL_COLOR = (200, 255, 200)
DEBUG_PADDING_COLOR = (240, 240, 240)
DEBUG_BORDER_COLOR = (100, 100, 100)

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".jxl", ".webp"}
LINE_SEPARATOR = "\n"


class PlotConfigError(ValueError):
	"""
	Raised when a plot configuration breaks the grid contract.
	"""


class LabelAlignment(enum.Enum):
	START = "start"
	CENTER = "center"
	END = "end"


@dataclasses.dataclass
class PlotConfig:
	images: list[pathlib.Path]
	output: pathlib.Path = pathlib.Path(DEFAULT_OUTPUT)
	rows: int = 1
	row_labels: list[str] = dataclasses.field(default_factory=list)
	column_labels: list[str] = dataclasses.field(default_factory=list)
	column_label_alignment: LabelAlignment = LabelAlignment.CENTER
	row_label_alignment: LabelAlignment = LabelAlignment.CENTER
	debug_mode: bool = False
	top_padding: int = DEFAULT_TOP_PADDING
	left_padding: int = DEFAULT_LEFT_PADDING
	font_size: float | None = None
	font_path: pathlib.Path | None = None
	emoji_font_path: pathlib.Path | None = None

	#============================================
	def resolved_font_size(self) -> float:
		"""
		Return the label point size, falling back to the default.
		"""
		if self.font_size is None:
			return DEFAULT_FONT_SIZE
		return self.font_size

	#============================================
	def has_labels(self) -> bool:
		"""
		Return True when any row or column label is configured.
		"""
		return bool(self.row_labels) or bool(self.column_labels)


@dataclasses.dataclass
class PlotResult:
	output_path: pathlib.Path
	debug_path: pathlib.Path | None
	width: int
	height: int
	image_count: int
	columns: int


#============================================
def parse_alignment(value: str | LabelAlignment | None) -> LabelAlignment:
	"""
	Parse an alignment string.

	Args:
		value: Alignment name like "start", "center" or "end".

	Returns:
		LabelAlignment, CENTER for anything unrecognized.
	"""
	if isinstance(value, LabelAlignment):
		return value
	if value is None:
		return LabelAlignment.CENTER
	normalized = value.strip().lower()
	if normalized == "start":
		return LabelAlignment.START
	if normalized == "end":
		return LabelAlignment.END
	return LabelAlignment.CENTER


#============================================
def build_debug_output_path(output: pathlib.Path) -> pathlib.Path:
	"""
	Derive the debug image path from the output path.

	Args:
		output: Output image path.

	Returns:
		Sibling path with "_debug" inserted before the extension.
	"""
	output = pathlib.Path(output)
	return output.with_name(f"{output.stem}_debug{output.suffix}")


#============================================
def non_negative_padding(value: int, name: str) -> int:
	"""
	Clamp a padding value read from a config file.

	Args:
		value: Raw padding value.
		name: Field name for the warning.

	Returns:
		Padding value, 0 when negative.
	"""
	if value < 0:
		print(f"Warning: negative {name} value ({value}), using 0 instead")
		return 0
	return value


#============================================
def load_plot_config(path: pathlib.Path) -> PlotConfig:
	"""
	Load a plot configuration from a JSON file.

	Args:
		path: JSON config path.

	Returns:
		PlotConfig.
	"""
	path = pathlib.Path(path)
	try:
		text = path.read_text(encoding="utf-8")
	except OSError as error:
		raise PlotConfigError(f"Failed to read config file: {path}") from error
	try:
		data = json.loads(text)
	except json.JSONDecodeError as error:
		raise PlotConfigError(f"Failed to parse JSON from config file: {path}") from error
	if not isinstance(data, dict):
		raise PlotConfigError(f"Config file must contain a JSON object: {path}")
	if "images" not in data or "output" not in data:
		raise PlotConfigError(f"Config file needs 'images' and 'output' keys: {path}")

	font_size = data.get("font_size", DEFAULT_FONT_SIZE)
	config = PlotConfig(
		images=[pathlib.Path(item) for item in data["images"]],
		output=pathlib.Path(data["output"]),
		rows=int(data.get("rows", 1)),
		row_labels=list(data.get("row_labels", [])),
		column_labels=list(data.get("column_labels", [])),
		column_label_alignment=parse_alignment(data.get("column_label_alignment")),
		row_label_alignment=parse_alignment(data.get("row_label_alignment")),
		debug_mode=bool(data.get("debug_mode", False)),
		top_padding=non_negative_padding(int(data.get("top_padding", DEFAULT_TOP_PADDING)), "top_padding"),
		left_padding=non_negative_padding(int(data.get("left_padding", DEFAULT_LEFT_PADDING)), "left_padding"),
		font_size=float(font_size) if font_size is not None else None,
	)
	if data.get("font_path"):
		config.font_path = pathlib.Path(data["font_path"])
	if data.get("emoji_font_path"):
		config.emoji_font_path = pathlib.Path(data["emoji_font_path"])
	return config
