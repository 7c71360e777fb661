"""
CLI entry points for labeled image grid plots.
"""

# Standard Library
import argparse
import pathlib
import tempfile
import time

# local repo modules
import image_grid_plotter as igp
import image_grid_plotter.config
import image_grid_plotter.image_processing
import image_grid_plotter.layout
import image_grid_plotter.render


PlotConfig = igp.config.PlotConfig
PlotConfigError = igp.config.PlotConfigError
PlotResult = igp.config.PlotResult

DEFAULT_TOP_PADDING = igp.config.DEFAULT_TOP_PADDING
DEFAULT_LEFT_PADDING = igp.config.DEFAULT_LEFT_PADDING
DEFAULT_OUTPUT = igp.config.DEFAULT_OUTPUT
LINE_SEPARATOR = igp.config.LINE_SEPARATOR

ImageFormatOptions = igp.image_processing.ImageFormatOptions

CONVERT_FORMATS = ("png", "jpeg", "webp", "gif")
DEFAULT_CONVERT_DIR = "converted"


#============================================
def unescape_label(text: str) -> str:
	"""
	Turn a literal backslash-n typed on the command line into a line break.
	"""
	return text.replace("\\n", LINE_SEPARATOR)


#============================================
def build_config(args: argparse.Namespace) -> PlotConfig:
	"""
	Build plot config from CLI args.

	A JSON config file, when given, supplies the base values and any
	option set on the command line overrides it.

	Args:
		args: Parsed argparse namespace.

	Returns:
		PlotConfig.
	"""
	if args.config_path:
		config = igp.config.load_plot_config(pathlib.Path(args.config_path))
		if args.images:
			config.images = [pathlib.Path(item) for item in args.images]
	else:
		if not args.images:
			raise PlotConfigError("No input images given; pass image paths or --config")
		config = PlotConfig(images=[pathlib.Path(item) for item in args.images])

	if args.output_path is not None:
		config.output = pathlib.Path(args.output_path)
	if args.rows is not None:
		config.rows = args.rows
	if args.row_labels:
		config.row_labels = [unescape_label(label) for label in args.row_labels]
	if args.column_labels:
		config.column_labels = [unescape_label(label) for label in args.column_labels]
	if args.row_align is not None:
		config.row_label_alignment = igp.config.parse_alignment(args.row_align)
	if args.column_align is not None:
		config.column_label_alignment = igp.config.parse_alignment(args.column_align)
	if args.top_padding is not None:
		config.top_padding = igp.config.non_negative_padding(args.top_padding, "top_padding")
	if args.left_padding is not None:
		config.left_padding = igp.config.non_negative_padding(args.left_padding, "left_padding")
	if args.font_size is not None:
		config.font_size = args.font_size
	if args.debug_mode is not None:
		config.debug_mode = args.debug_mode
	if args.font_path is not None:
		config.font_path = pathlib.Path(args.font_path)
	if args.emoji_font_path is not None:
		config.emoji_font_path = pathlib.Path(args.emoji_font_path)
	return config


#============================================
def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse command line arguments.

	Args:
		argv: Argument list, defaults to sys.argv[1:].

	Returns:
		Parsed argparse namespace.
	"""
	parser = argparse.ArgumentParser(description="Arrange images in a labeled grid.")
	parser.add_argument("images", nargs="*", help="Input image files, filled row by row.")

	input_group = parser.add_argument_group("Input and output")
	input_group.add_argument("-c", "--config", dest="config_path", default=None, help="JSON config file.")
	input_group.add_argument(
		"-o",
		"--output",
		dest="output_path",
		default=None,
		help=f"Output image path; the extension picks the format (default {DEFAULT_OUTPUT}).",
	)

	grid_group = parser.add_argument_group("Grid")
	grid_group.add_argument("-r", "--rows", dest="rows", type=int, default=None, help="Number of rows (default 1).")
	grid_group.add_argument(
		"--top-padding",
		dest="top_padding",
		type=int,
		default=None,
		help=f"Minimum top padding in pixels (default {DEFAULT_TOP_PADDING}).",
	)
	grid_group.add_argument(
		"--left-padding",
		dest="left_padding",
		type=int,
		default=None,
		help=f"Minimum left padding in pixels (default {DEFAULT_LEFT_PADDING}).",
	)

	label_group = parser.add_argument_group("Labels")
	label_group.add_argument(
		"-R",
		"--row-label",
		dest="row_labels",
		action="append",
		default=[],
		help="Row label, repeat once per row. Use \\n for a line break.",
	)
	label_group.add_argument(
		"-L",
		"--column-label",
		dest="column_labels",
		action="append",
		default=[],
		help="Column label, repeat once per column. Use \\n for a line break.",
	)
	label_group.add_argument(
		"--row-align",
		dest="row_align",
		choices=("start", "center", "end"),
		default=None,
		help="Row label alignment.",
	)
	label_group.add_argument(
		"--column-align",
		dest="column_align",
		choices=("start", "center", "end"),
		default=None,
		help="Column label alignment.",
	)
	label_group.add_argument("-s", "--font-size", dest="font_size", type=float, default=None, help="Label font size.")
	label_group.add_argument("--font", dest="font_path", default=None, help="Primary font file.")
	label_group.add_argument("--emoji-font", dest="emoji_font_path", default=None, help="Fallback emoji font file.")

	prep_group = parser.add_argument_group("Preprocessing")
	prep_group.add_argument(
		"--remove-letterbox",
		dest="remove_letterbox",
		action="store_true",
		help="Crop dark borders from working copies of the inputs.",
	)
	prep_group.add_argument(
		"--letterbox-threshold",
		dest="letterbox_threshold",
		type=int,
		default=0,
		help="Channel value at or below which a border pixel counts as black (default 0).",
	)
	prep_group.add_argument(
		"-t",
		"--fill-transparency",
		dest="fill_transparency",
		action="store_true",
		help="Turn fully transparent pixels black in working copies of the inputs.",
	)
	prep_group.add_argument(
		"-T",
		"--keep-transparency",
		dest="fill_transparency",
		action="store_false",
		help="Leave transparent pixels as they are.",
	)

	convert_group = parser.add_argument_group("Conversion")
	convert_group.add_argument(
		"--convert-to",
		dest="convert_format",
		choices=CONVERT_FORMATS,
		default=None,
		help="Convert the inputs to this format instead of plotting.",
	)
	convert_group.add_argument(
		"--convert-dir",
		dest="convert_dir",
		default=DEFAULT_CONVERT_DIR,
		help=f"Directory for converted images (default {DEFAULT_CONVERT_DIR}).",
	)
	convert_group.add_argument("-q", "--quality", dest="quality", type=int, default=None, help="Encoder quality 0-100.")
	convert_group.add_argument("--lossless", dest="lossless", action="store_true", help="Lossless WebP output.")

	behavior_group = parser.add_argument_group("Behavior")
	behavior_group.add_argument("-d", "--debug", dest="debug_mode", action="store_true", help="Also write a layout debug image.")
	behavior_group.add_argument("-D", "--no-debug", dest="debug_mode", action="store_false", help="Skip the layout debug image.")

	parser.set_defaults(
		debug_mode=None,
		fill_transparency=False,
	)

	args = parser.parse_args(argv)
	return args


#============================================
def build_format_options(args: argparse.Namespace) -> ImageFormatOptions:
	"""
	Pick the encoder preset for --convert-to and apply overrides.

	Args:
		args: Parsed argparse namespace.

	Returns:
		ImageFormatOptions.
	"""
	presets = {
		"jpeg": ImageFormatOptions.jpeg,
		"png": ImageFormatOptions.png,
		"webp": ImageFormatOptions.webp,
	}
	options = presets.get(args.convert_format, ImageFormatOptions)()
	if args.quality is not None:
		options = options.with_quality(args.quality)
	if args.lossless:
		options = options.with_lossless(True)
	return options


#============================================
def run_conversion(args: argparse.Namespace) -> list[pathlib.Path]:
	"""
	Convert the input images into one directory and report the result.

	Args:
		args: Parsed argparse namespace.

	Returns:
		Written output paths.
	"""
	if not args.images:
		raise PlotConfigError("No input images given for --convert-to")
	options = build_format_options(args)
	print("Image conversion")
	print(f"Images: {len(args.images)}")
	print(f"Format: {args.convert_format.upper()} (quality={options.quality} lossless={options.lossless})")
	print(f"Output directory: {args.convert_dir}")

	start_time = time.perf_counter()
	outputs = igp.image_processing.convert_images_batch(
		[pathlib.Path(item) for item in args.images],
		pathlib.Path(args.convert_dir),
		args.convert_format.upper(),
		options,
	)
	total_time = time.perf_counter() - start_time

	print(f"Converted: {len(outputs)} images")
	print("Timing: total={:.2f}s".format(total_time))
	return outputs


#============================================
def run_pipeline(args: argparse.Namespace) -> PlotResult:
	"""
	Build the config, render the grid, and report the result.

	With --remove-letterbox or --fill-transparency the grid is built from
	cleaned copies in a temporary directory; the inputs stay untouched.

	Args:
		args: Parsed argparse namespace.

	Returns:
		PlotResult.
	"""
	config = build_config(args)
	preprocess = args.remove_letterbox or args.fill_transparency
	print("Image grid plot")
	print(f"Images: {len(config.images)}")
	print(f"Output: {config.output}")
	print(f"Rows: {config.rows}")
	if config.row_labels:
		print(f"Row labels: {len(config.row_labels)} ({config.row_label_alignment.value})")
	if config.column_labels:
		print(f"Column labels: {len(config.column_labels)} ({config.column_label_alignment.value})")
	print(f"Padding: top={config.top_padding} left={config.left_padding}")
	print(f"Font size: {config.resolved_font_size()}")
	print(f"Debug mode: {config.debug_mode}")
	if preprocess:
		if args.remove_letterbox:
			print(f"Letterbox threshold: {args.letterbox_threshold}")
		print(f"Fill transparency: {args.fill_transparency}")

	start_time = time.perf_counter()
	if preprocess:
		igp.layout.validate_plot_config(config)
		with tempfile.TemporaryDirectory(prefix="image_grid_") as work_dir:
			config.images = igp.image_processing.prepare_images(
				config.images,
				pathlib.Path(work_dir),
				args.letterbox_threshold if args.remove_letterbox else None,
				args.fill_transparency,
			)
			prep_time = time.perf_counter() - start_time
			result = igp.render.create_plot(config)
	else:
		prep_time = 0.0
		result = igp.render.create_plot(config)
	total_time = time.perf_counter() - start_time

	print(f"Grid: {config.rows} rows x {result.columns} columns")
	print(f"Canvas: {result.width}x{result.height}")
	print(f"Plot written: {result.output_path}")
	if result.debug_path is not None:
		print(f"Debug plot written: {result.debug_path}")
	print("Timing: prep={:.2f}s total={:.2f}s".format(prep_time, total_time))
	return result


#============================================
def main(argv: list[str] | None = None) -> None:
	"""
	Main entry point.
	"""
	args = parse_args(argv)
	if args.convert_format is not None:
		run_conversion(args)
		return
	run_pipeline(args)
