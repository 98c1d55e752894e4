#!/usr/bin/env python3

import decimal
import math

_QUIET_MODE = False

#============================================

def set_quiet_mode(quiet: bool) -> None:
	global _QUIET_MODE
	_QUIET_MODE = bool(quiet)
	return

#============================================

def is_quiet_mode() -> bool:
	return _QUIET_MODE

#============================================

def output(message: str) -> None:
	if _QUIET_MODE:
		return
	print(message)
	return

#============================================

def seconds_from_frames(frames: int, sample_rate: int) -> float:
	if sample_rate <= 0:
		raise RuntimeError("sample rate must be positive")
	return frames / float(sample_rate)

#============================================

def frames_from_seconds(seconds: float, sample_rate: int) -> int:
	# half-up rounding
	return int(math.floor(seconds * sample_rate + 0.5))

#============================================

def frames_at_least(seconds: float, sample_rate: int) -> int:
	"""
	Smallest whole frame count whose duration is not below seconds.

	Decimal keeps 0.3 s at 1000 Hz from landing on 301 frames.
	"""
	value = decimal.Decimal(str(seconds)) * decimal.Decimal(sample_rate)
	value = value.quantize(decimal.Decimal("1"), rounding=decimal.ROUND_CEILING)
	return int(value)

#============================================

def seconds_to_millis(seconds: float) -> int:
	"""
	Convert seconds to integer milliseconds using half-up rounding.
	"""
	value = decimal.Decimal(str(seconds)) * decimal.Decimal(1000)
	value = value.quantize(decimal.Decimal("1"), rounding=decimal.ROUND_HALF_UP)
	result = int(value)
	if result < 0:
		result = 0
	return result

#============================================

def format_timestamp(seconds: float) -> str:
	"""
	Format seconds as HH:MM:SS.mmm.

	Rounds to whole milliseconds first so a carry lands in the
	next minute instead of showing 60 seconds.
	"""
	total_millis = seconds_to_millis(seconds)
	hours = total_millis // 3600000
	minutes = (total_millis // 60000) % 60
	secs = (total_millis // 1000) % 60
	millis = total_millis % 1000
	return f"{hours:02d}:{minutes:02d}:{secs:02d}.{millis:03d}"

#============================================

def frame_to_time(frame: int, sample_rate: int) -> str:
	return format_timestamp(seconds_from_frames(frame, sample_rate))

#============================================

def format_frame(frame: int, digits: int) -> str:
	return f"{frame:0{digits}d}"

#============================================

def format_lufs(value: float) -> str:
	if math.isinf(value):
		return "-inf" if value < 0 else "inf"
	return f"{value:.3f}"
