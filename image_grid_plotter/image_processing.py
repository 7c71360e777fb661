"""
Source image cleanup and format conversion.
"""

# Standard Library
import dataclasses
import pathlib
import shutil

# PIP3 modules
import PIL.Image

# local repo modules
import image_grid_plotter as igp
import image_grid_plotter.image_io


ImageIOError = igp.image_io.ImageIOError

FORMAT_EXTENSIONS = {
	"JPEG": "jpg",
	"PNG": "png",
	"WEBP": "webp",
	"GIF": "gif",
}

# modes the JPEG encoder accepts as is
JPEG_MODES = ("RGB", "L", "CMYK")


@dataclasses.dataclass
class ImageFormatOptions:
	quality: int = 90
	lossless: bool = False

	#============================================
	@classmethod
	def jpeg(cls) -> "ImageFormatOptions":
		return cls(quality=85, lossless=False)

	#============================================
	@classmethod
	def png(cls) -> "ImageFormatOptions":
		return cls(quality=100, lossless=True)

	#============================================
	@classmethod
	def webp(cls) -> "ImageFormatOptions":
		return cls(quality=80, lossless=False)

	#============================================
	def with_quality(self, quality: int) -> "ImageFormatOptions":
		"""
		Return a copy with quality clamped to 0-100.
		"""
		return dataclasses.replace(self, quality=max(0, min(100, quality)))

	#============================================
	def with_lossless(self, lossless: bool) -> "ImageFormatOptions":
		"""
		Return a copy with the lossless flag set.
		"""
		return dataclasses.replace(self, lossless=lossless)


#============================================
def _is_letterbox_pixel(pixel: tuple[int, int, int], threshold: int) -> bool:
	return pixel[0] <= threshold and pixel[1] <= threshold and pixel[2] <= threshold


#============================================
def find_letterbox_bounds(image: PIL.Image.Image, threshold: int = 0) -> tuple[int, int, int, int] | None:
	"""
	Find the content box inside uniform dark borders.

	Args:
		image: Source image.
		threshold: Channel value at or below which a pixel counts as border.

	Returns:
		Crop box (left, top, right, bottom) with exclusive right/bottom, or
		None when there is nothing to crop.
	"""
	rgb = image.convert("RGB")
	width, height = rgb.size
	if width == 0 or height == 0:
		return None
	pixels = rgb.load()

	def row_has_content(y: int) -> bool:
		return any(not _is_letterbox_pixel(pixels[x, y], threshold) for x in range(width))

	def column_has_content(x: int) -> bool:
		return any(not _is_letterbox_pixel(pixels[x, y], threshold) for y in range(height))

	top = next((y for y in range(height) if row_has_content(y)), None)
	if top is None:
		return None
	bottom = next(y for y in range(height - 1, -1, -1) if row_has_content(y))
	left = next(x for x in range(width) if column_has_content(x))
	right = next(x for x in range(width - 1, -1, -1) if column_has_content(x))

	if left >= right or top >= bottom:
		return None
	box = (left, top, right + 1, bottom + 1)
	if box == (0, 0, width, height):
		return None
	return box


#============================================
def remove_letterbox(
	path: pathlib.Path,
	threshold: int = 0,
	output_path: pathlib.Path | None = None,
) -> bool:
	"""
	Crop letterbox borders from an image file.

	Args:
		path: Image path.
		threshold: Border threshold, 0 for exact black.
		output_path: Destination, defaults to overwriting the source.

	Returns:
		True if the image was cropped.
	"""
	path = pathlib.Path(path)
	if output_path is None:
		output_path = path
	# crop in the source mode so alpha and palettes survive
	image = igp.image_io.open_image(path, mode=None)
	box = find_letterbox_bounds(image, threshold)
	if box is None:
		print(f"No letterbox detected in image: {path}")
		return False
	cropped = image.crop(box)
	igp.image_io.save_image(cropped, output_path)
	print(f"Cropped image from {image.width}x{image.height} to {cropped.width}x{cropped.height}")
	return True


#============================================
def remove_transparency(path: pathlib.Path, output_path: pathlib.Path | None = None) -> bool:
	"""
	Make fully transparent pixels opaque black.

	Args:
		path: Image path; files without an image extension are skipped.
		output_path: Destination, defaults to overwriting the source.

	Returns:
		True if the image was processed, False when it has no alpha.
	"""
	path = pathlib.Path(path)
	if not igp.image_io.is_image_file(path):
		return False
	if output_path is None:
		output_path = path
	print(f"Processing image: {path}")
	try:
		with PIL.Image.open(path) as source:
			has_alpha = "A" in source.getbands() or "transparency" in source.info
			rgba = source.convert("RGBA")
	except (OSError, ValueError) as error:
		raise ImageIOError(f"Failed to open image: {path}") from error

	if not has_alpha:
		print(f"No transparency in image: {path}")
		return False
	black = PIL.Image.new("RGBA", rgba.size, (0, 0, 0, 255))
	transparent_mask = rgba.getchannel("A").point(lambda value: 255 if value == 0 else 0)
	opaque = rgba.copy()
	opaque.paste(black, (0, 0), transparent_mask)
	igp.image_io.save_image(opaque, output_path)
	print(f"Processed and saved: {output_path}")
	return True


#============================================
def _save_kwargs(image_format: str, options: ImageFormatOptions) -> dict:
	"""
	Translate conversion options into Pillow save arguments.

	Args:
		image_format: Pillow format name.
		options: Conversion options.

	Returns:
		Keyword arguments for Image.save.
	"""
	if image_format == "JPEG":
		return {"quality": options.quality}
	if image_format == "WEBP":
		return {"quality": options.quality, "lossless": options.lossless}
	if image_format == "PNG":
		return {"optimize": True}
	return {}


#============================================
def convert_image(
	input_path: pathlib.Path,
	output_path: pathlib.Path,
	options: ImageFormatOptions | None = None,
) -> None:
	"""
	Re-encode an image into the format of the output extension.

	Args:
		input_path: Source image.
		output_path: Destination image.
		options: Quality options, defaults to ImageFormatOptions().
	"""
	input_path = pathlib.Path(input_path)
	output_path = pathlib.Path(output_path)
	image_format = PIL.Image.registered_extensions().get(output_path.suffix.lower())
	if image_format is None:
		raise ImageIOError(f"Could not determine output format from file extension: {output_path}")
	if options is None:
		options = ImageFormatOptions()
	print(f"Converting {input_path} to {output_path}")
	image = igp.image_io.open_image(input_path, mode=None)
	if image_format == "JPEG" and image.mode not in JPEG_MODES:
		image = image.convert("RGB")
	output_path.parent.mkdir(parents=True, exist_ok=True)
	try:
		image.save(output_path, format=image_format, **_save_kwargs(image_format, options))
	except (OSError, ValueError) as error:
		raise ImageIOError(f"Failed to save image as {image_format}: {output_path}") from error


#============================================
def convert_images_batch(
	input_paths: list[pathlib.Path],
	output_dir: pathlib.Path,
	image_format: str,
	options: ImageFormatOptions | None = None,
) -> list[pathlib.Path]:
	"""
	Convert several images into one directory.

	Args:
		input_paths: Source images.
		output_dir: Destination directory, created when missing.
		image_format: Pillow format name like "PNG" or "WEBP".
		options: Quality options.

	Returns:
		Written output paths.
	"""
	output_dir = pathlib.Path(output_dir)
	output_dir.mkdir(parents=True, exist_ok=True)
	extension = FORMAT_EXTENSIONS.get(image_format.upper(), "bin")
	total = len(input_paths)
	print(f"Converting batch of {total} images to {image_format.upper()}")
	outputs: list[pathlib.Path] = []
	for index, input_path in enumerate(input_paths, start=1):
		input_path = pathlib.Path(input_path)
		output_path = output_dir / f"{input_path.name.split('.')[0] or 'image'}.{extension}"
		print(f"[{index}/{total}] {input_path} -> {output_path}")
		convert_image(input_path, output_path, options)
		outputs.append(output_path)
	return outputs


#============================================
def convert_jxl_to_png(input_path: pathlib.Path, output_path: pathlib.Path) -> None:
	"""
	Decode a JPEG XL file and write it as PNG.

	Args:
		input_path: JXL file.
		output_path: PNG destination.
	"""
	print(f"Converting JXL to PNG: {input_path} -> {output_path}")
	image = igp.image_io.decode_jxl(input_path)
	igp.image_io.save_image(image, output_path)


#============================================
def prepare_images(
	input_paths: list[pathlib.Path],
	work_dir: pathlib.Path,
	letterbox_threshold: int | None = None,
	fill_transparency: bool = False,
) -> list[pathlib.Path]:
	"""
	Copy source images into a work directory and clean up the copies.

	JXL files are decoded to PNG. The originals are never modified, and
	each copy keeps its file name inside a numbered subdirectory.

	Args:
		input_paths: Source images, in grid order.
		work_dir: Existing directory that receives the copies.
		letterbox_threshold: Crop letterbox borders at this threshold, or None to skip.
		fill_transparency: Turn fully transparent pixels black.

	Returns:
		Paths of the prepared copies, in the same order.
	"""
	work_dir = pathlib.Path(work_dir)
	prepared: list[pathlib.Path] = []
	for index, input_path in enumerate(input_paths):
		input_path = pathlib.Path(input_path)
		slot_dir = work_dir / f"{index:04d}"
		slot_dir.mkdir()
		if igp.image_io.is_jxl_file(input_path):
			work_path = slot_dir / f"{input_path.stem}.png"
			convert_jxl_to_png(input_path, work_path)
		else:
			work_path = slot_dir / input_path.name
			try:
				shutil.copyfile(input_path, work_path)
			except OSError as error:
				raise ImageIOError(f"Failed to read image: {input_path}") from error
		if letterbox_threshold is not None:
			remove_letterbox(work_path, letterbox_threshold)
		if fill_transparency:
			remove_transparency(work_path)
		prepared.append(work_path)
	return prepared
