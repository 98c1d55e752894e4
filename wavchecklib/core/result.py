#!/usr/bin/env python3

from wavchecklib.core.config import AnalysisConfig
from wavchecklib.core.models import AnalysisResult
from wavchecklib.core.models import SilenceResult

# exit status bits, bit order is fixed
STATUS_UNDERRUN = 0b0001
STATUS_SILENCE = 0b0010

#============================================

def silence_percentage(silent_frames: int, total_frames: int) -> float:
	# a zero-length program has nothing to measure
	if total_frames <= 0:
		return 0.0
	return silent_frames * 100.0 / total_frames

#============================================

def status_mask(config: AnalysisConfig, underrun_count: int, silent_frames: int,
	percentage: float) -> int:
	"""
	Combine detector outcomes into the two-bit exit status.

	The silence comparison is inclusive: a file at exactly the
	configured percentage trips the bit. A file with no silent frames
	never trips it, even at a threshold of 0.
	"""
	status = 0
	if config.detect_underruns and underrun_count > 0:
		status |= STATUS_UNDERRUN
	if (config.detect_silence and silent_frames > 0
		and percentage >= config.silence_percentage):
		status |= STATUS_SILENCE
	return status

#============================================

def aggregate(underruns: list, silence: SilenceResult, total_frames: int,
	sample_rate: int, config: AnalysisConfig) -> AnalysisResult:
	"""
	Build the final AnalysisResult.

	Args:
		underruns: UnderrunEvent list.
		silence: SilenceClassifier output.
		total_frames: Program length in frames.
		sample_rate: Sample rate in Hz.
		config: Analysis configuration.

	Returns:
		AnalysisResult: Immutable result with status mask.
	"""
	percentage = silence_percentage(silence.silent_frames, total_frames)
	status = status_mask(config, len(underruns), silence.silent_frames, percentage)
	return AnalysisResult(
		underruns=tuple(underruns),
		silences=tuple(silence.intervals),
		silent_frames=silence.silent_frames,
		total_frames=total_frames,
		sample_rate=sample_rate,
		silence_percentage=percentage,
		status=status,
	)
