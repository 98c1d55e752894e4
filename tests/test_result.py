#!/usr/bin/env python3

"""
Unit tests for the result aggregator and status mask.
"""

# Standard Library
import os
import sys

# PIP3 modules
import pytest

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
	sys.path.insert(0, REPO_ROOT)

from wavchecklib.core.config import AnalysisConfig
from wavchecklib.core.models import SilenceInterval
from wavchecklib.core.models import SilenceResult
from wavchecklib.core.models import UnderrunEvent
from wavchecklib.core.result import STATUS_SILENCE
from wavchecklib.core.result import STATUS_UNDERRUN
from wavchecklib.core.result import aggregate
from wavchecklib.core.result import silence_percentage

#============================================

RATE = 1000

def _silence(silent_frames: int) -> SilenceResult:
	intervals = ()
	if silent_frames > 0:
		intervals = (SilenceInterval(0, silent_frames, RATE),)
	return SilenceResult(intervals=intervals, silent_frames=silent_frames,
		sample_rate=RATE)

def _event() -> UnderrunEvent:
	return UnderrunEvent(channel=0, start_frame=10, length=20, value=0.0,
		sample_rate=RATE)

#============================================

def test_bit_order_is_fixed() -> None:
	assert STATUS_UNDERRUN == 0b01
	assert STATUS_SILENCE == 0b10

#============================================

def test_both_bits_compose() -> None:
	config = AnalysisConfig(detect_underruns=True, detect_silence=True)
	result = aggregate([_event()], _silence(1000), 1000, RATE, config)
	assert result.status == 0b11
	assert result.silence_percentage == 100.0
	assert result.contains_underrun

#============================================

def test_disabled_features_never_set_bits() -> None:
	"""
	Ensure unrequested detections leave their bits clear.
	"""
	config = AnalysisConfig(detect_underruns=False, detect_silence=False)
	result = aggregate([_event()], _silence(1000), 1000, RATE, config)
	assert result.status == 0
	# percentage is still reported
	assert result.silence_percentage == 100.0
	assert len(result.underruns) == 1

#============================================

def test_percentage_boundary_is_inclusive() -> None:
	"""
	Ensure exactly the configured percentage trips the silence bit.
	"""
	config = AnalysisConfig(detect_silence=True, silence_percentage=99.0)
	at_boundary = aggregate([], _silence(990), 1000, RATE, config)
	assert at_boundary.silence_percentage == 99.0
	assert at_boundary.status == STATUS_SILENCE
	below = aggregate([], _silence(989), 1000, RATE, config)
	assert below.silence_percentage == pytest.approx(98.9)
	assert below.status == 0

#============================================

def test_zero_length_program_reports_zero_percent() -> None:
	config = AnalysisConfig(detect_silence=True, silence_percentage=0.0)
	assert silence_percentage(0, 0) == 0.0
	result = aggregate([], _silence(0), 0, RATE, config)
	assert result.silence_percentage == 0.0
	assert result.program_duration == 0.0
	assert result.status == 0

#============================================

def test_zero_threshold_needs_some_silence() -> None:
	"""
	Ensure a threshold of 0 only trips on files that contain silence.
	"""
	config = AnalysisConfig(detect_silence=True, silence_percentage=0.0)
	none_silent = aggregate([], _silence(0), 1000, RATE, config)
	assert none_silent.silence_percentage == 0.0
	assert none_silent.status == 0
	one_frame = aggregate([], _silence(1), 1000, RATE, config)
	assert one_frame.status == STATUS_SILENCE

#============================================

def test_result_is_immutable() -> None:
	config = AnalysisConfig(detect_underruns=True)
	result = aggregate([_event()], _silence(0), 1000, RATE, config)
	assert isinstance(result.underruns, tuple)
	with pytest.raises(AttributeError):
		result.status = 0
