"""
Clamped conversions between float measurements and pixel coordinates.
"""

# Standard Library
import math


I32_MAX = 2**31 - 1
I32_MIN = -(2**31)
U32_MAX = 2**32 - 1
BYTE_MAX = 255

# 2^24, largest integer a 32-bit float holds exactly
FLOAT_MAX_SAFE_INT = 16_777_216.0
FLOAT_MIN_SAFE_INT = -16_777_216.0


#============================================
def round_half_away(value: float) -> int:
	"""
	Round to the nearest integer, ties away from zero.

	Args:
		value: Finite float.

	Returns:
		Rounded integer.
	"""
	if value < 0:
		return -int(math.floor(-value + 0.5))
	return int(math.floor(value + 0.5))


#============================================
def float_to_int(value: float) -> int:
	"""
	Convert a float to a signed 32-bit pixel coordinate.

	NaN becomes 0 and values outside the exactly representable range clamp
	to the signed 32-bit limits.

	Args:
		value: Float value.

	Returns:
		Rounded, clamped integer.
	"""
	if math.isnan(value):
		return 0
	if value >= FLOAT_MAX_SAFE_INT:
		return I32_MAX
	if value <= FLOAT_MIN_SAFE_INT:
		return I32_MIN
	return round_half_away(value)


#============================================
def float_to_unsigned(value: float) -> int:
	"""
	Convert a float to an unsigned 32-bit size.

	Args:
		value: Float value.

	Returns:
		Rounded integer in 0..U32_MAX, 0 for NaN.
	"""
	if math.isnan(value) or value <= 0.0:
		return 0
	if value >= U32_MAX:
		return U32_MAX
	return min(U32_MAX, round_half_away(value))


#============================================
def float_to_byte(value: float) -> int:
	"""
	Convert a float to a color channel value.

	Args:
		value: Float value.

	Returns:
		Rounded integer in 0..255, 0 for NaN.
	"""
	if math.isnan(value) or value <= 0.0:
		return 0
	if value >= BYTE_MAX:
		return BYTE_MAX
	return round_half_away(value)


#============================================
def int_to_unsigned(value: int) -> int:
	"""
	Clamp a signed integer into the unsigned 32-bit range.
	"""
	return min(max(value, 0), U32_MAX)


#============================================
def unsigned_to_int(value: int) -> int:
	"""
	Clamp an unsigned integer into the signed 32-bit range.
	"""
	return min(max(value, 0), I32_MAX)


#============================================
def int_to_float_for_pos(value: int) -> float:
	"""
	Convert an integer coordinate to a float text position.
	"""
	return float(value)


#============================================
def ceil_to_unsigned(value: float) -> int:
	"""
	Round a float measurement up to an unsigned pixel count.

	Args:
		value: Float value, typically a label width.

	Returns:
		Ceiling clamped to 0..U32_MAX, 0 for NaN.
	"""
	if math.isnan(value) or value <= 0.0:
		return 0
	if value >= U32_MAX:
		return U32_MAX
	return int(math.ceil(value))
