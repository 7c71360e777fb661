"""
Image decode and encode helpers.
"""

# Standard Library
import pathlib
import shutil
import subprocess
import tempfile

# PIP3 modules
import PIL.Image
import reportlab.lib.utils
import reportlab.pdfgen.canvas

# local repo modules
import image_grid_plotter as igp
import image_grid_plotter.config


DJXL_COMMAND = "djxl"
PDF_EXTENSION = ".pdf"


class ImageIOError(OSError):
	"""
	Raised when an image cannot be read or written.
	"""


#============================================
def is_image_file(path: pathlib.Path) -> bool:
	"""
	Check whether a path has a supported image extension.

	Args:
		path: File path.

	Returns:
		True for jpg, jpeg, png, jxl and webp files.
	"""
	return pathlib.Path(path).suffix.lower() in igp.config.IMAGE_EXTENSIONS


#============================================
def is_jxl_file(path: pathlib.Path) -> bool:
	"""
	Check whether a path is a JPEG XL file.
	"""
	return pathlib.Path(path).suffix.lower() == ".jxl"


#============================================
def decode_jxl(path: pathlib.Path) -> PIL.Image.Image:
	"""
	Decode a JPEG XL file with the external djxl tool.

	Args:
		path: JXL file path.

	Returns:
		Decoded RGBA or RGB image.
	"""
	path = pathlib.Path(path)
	djxl_path = shutil.which(DJXL_COMMAND)
	if djxl_path is None:
		raise ImageIOError(f"Failed to decode JXL file {path}: {DJXL_COMMAND} not found on PATH")
	if not path.is_file():
		raise ImageIOError(f"Failed to read JXL file: {path}")
	with tempfile.TemporaryDirectory() as temp_dir:
		png_path = pathlib.Path(temp_dir) / "decoded.png"
		result = subprocess.run(
			[djxl_path, str(path), str(png_path)],
			capture_output=True,
			text=True,
			check=False,
		)
		if result.returncode != 0 or not png_path.exists():
			message = result.stderr.strip() or "djxl failed"
			raise ImageIOError(f"Failed to decode JXL file {path}: {message}")
		with PIL.Image.open(png_path) as decoded:
			decoded.load()
			return decoded.copy()


#============================================
def open_image(path: pathlib.Path, mode: str | None = "RGB") -> PIL.Image.Image:
	"""
	Open an image file as a pixel buffer.

	Args:
		path: Image path.
		mode: Pillow mode to convert to, or None to keep the file's mode.

	Returns:
		Decoded image, RGB by default.
	"""
	path = pathlib.Path(path)
	if is_jxl_file(path):
		image = decode_jxl(path)
		return image if mode is None else image.convert(mode)
	try:
		with PIL.Image.open(path) as image:
			image.load()
			if mode is None:
				return image.copy()
			return image.convert(mode)
	except (OSError, ValueError) as error:
		raise ImageIOError(f"Failed to open image: {path}") from error


#============================================
def get_image_dimensions(path: pathlib.Path) -> tuple[int, int]:
	"""
	Read the size of an image.

	Args:
		path: Image path.

	Returns:
		Tuple of (width, height).
	"""
	path = pathlib.Path(path)
	if is_jxl_file(path):
		return decode_jxl(path).size
	try:
		with PIL.Image.open(path) as image:
			return image.size
	except (OSError, ValueError) as error:
		raise ImageIOError(f"Failed to open image: {path}") from error


#============================================
def save_pdf(image: PIL.Image.Image, path: pathlib.Path) -> None:
	"""
	Write an image as a single PDF page of the same size.

	One pixel maps to one PDF point.

	Args:
		image: Image to write.
		path: Output PDF path.
	"""
	width, height = image.size
	pdf = reportlab.pdfgen.canvas.Canvas(str(path), pagesize=(width, height))
	pdf.drawImage(reportlab.lib.utils.ImageReader(image), 0, 0, width=width, height=height)
	pdf.showPage()
	pdf.save()


#============================================
def save_image(image: PIL.Image.Image, path: pathlib.Path) -> None:
	"""
	Save an image, choosing the format from the file extension.

	Args:
		image: Image to write.
		path: Output path; the parent directory must exist.
	"""
	path = pathlib.Path(path)
	if not path.parent.is_dir():
		raise ImageIOError(f"Output directory does not exist: {path.parent}")
	try:
		if path.suffix.lower() == PDF_EXTENSION:
			save_pdf(image, path)
		else:
			image.save(path)
	except (OSError, ValueError, KeyError) as error:
		raise ImageIOError(f"Failed to save image: {path}") from error
