#!/usr/bin/env python3

from wavchecklib.core.errors import ConfigError
from wavchecklib.core.models import SilenceInterval
from wavchecklib.core.models import SilenceResult
from wavchecklib.core.utils import frames_at_least

DEFAULT_SILENCE_LUFS = -70.0

#============================================

def is_silent(loudness: float, threshold: float) -> bool:
	# inclusive floor; -inf always qualifies
	return loudness <= threshold

#============================================

def classify_silence(windows: list, threshold: float = DEFAULT_SILENCE_LUFS,
	min_silence: float = 0.0, sample_rate: int = None) -> SilenceResult:
	"""
	Merge consecutive silent loudness windows into silence intervals.

	Args:
		windows: LoudnessWindow list in index order.
		threshold: Loudness at or below which a window is silent (LUFS-S).
		min_silence: Shortest interval kept, in seconds.
		sample_rate: Sample rate used when windows is empty.

	Returns:
		SilenceResult: Kept intervals and their total length.
	"""
	if min_silence < 0:
		raise ConfigError("minimum silence duration must not be negative")
	if len(windows) > 0:
		sample_rate = windows[0].sample_rate
	if sample_rate is None:
		sample_rate = 1
	# kept intervals are never shorter than min_silence
	min_frames = frames_at_least(min_silence, sample_rate)
	intervals = []
	open_start = None
	open_end = None
	previous_index = None
	for window in windows:
		silent = is_silent(window.loudness, threshold)
		adjacent = previous_index is not None and window.index == previous_index + 1
		previous_index = window.index
		if silent and open_start is not None and adjacent:
			open_end = window.end_frame
			continue
		if open_start is not None:
			_keep_interval(intervals, open_start, open_end, min_frames, sample_rate)
			open_start = None
		if silent:
			open_start = window.start_frame
			open_end = window.end_frame
	if open_start is not None:
		_keep_interval(intervals, open_start, open_end, min_frames, sample_rate)
	silent_frames = sum(interval.duration_frames for interval in intervals)
	return SilenceResult(intervals=tuple(intervals), silent_frames=silent_frames,
		sample_rate=sample_rate)

#============================================

def _keep_interval(intervals: list, start_frame: int, end_frame: int,
	min_frames: int, sample_rate: int) -> None:
	if (end_frame - start_frame) < min_frames:
		return
	intervals.append(SilenceInterval(start_frame=start_frame,
		end_frame=end_frame, sample_rate=sample_rate))
	return
