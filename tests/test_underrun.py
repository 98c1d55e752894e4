#!/usr/bin/env python3

"""
Unit tests for the underrun run-length scanner.
"""

# Standard Library
import os
import sys

# PIP3 modules
import numpy
import pytest

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
	sys.path.insert(0, REPO_ROOT)

# local repo modules
from wavchecklib.analysers.underrun import UnderrunDetector
from wavchecklib.analysers.underrun import detect_underruns
from wavchecklib.core.errors import ConfigError

#============================================

def _noise_with_runs(runs: list, frames: int = 2000) -> numpy.ndarray:
	rng = numpy.random.default_rng(42)
	samples = rng.uniform(-1.0, 1.0, frames)
	for start, length in runs:
		samples[start:start + length] = 0.25
	return samples

#============================================

def test_run_below_minimum_is_ignored() -> None:
	"""
	Ensure 15 identical samples do not count with minimum 16.
	"""
	samples = [0.2] + [0.5] * 15 + [0.3]
	assert detect_underruns(samples, 16) == []

#============================================

def test_run_at_minimum_is_reported() -> None:
	"""
	Ensure exactly 16 identical samples yield one event.
	"""
	samples = [0.2] + [0.5] * 16 + [0.3]
	events = detect_underruns(samples, 16)
	assert len(events) == 1
	assert events[0].start_frame == 1
	assert events[0].length == 16
	assert events[0].value == 0.5

#============================================

def test_trailing_run_is_flushed() -> None:
	"""
	Ensure a run reaching end of stream is reported like an interior run.
	"""
	samples = [0.1, 0.2] + [0.0] * 20
	events = detect_underruns(samples, 16)
	assert len(events) == 1
	assert events[0].start_frame == 2
	assert events[0].length == 20
	assert events[0].end_frame == 22

#============================================

def test_whole_stream_single_run() -> None:
	"""
	Ensure a constant stream is one event covering every frame.
	"""
	events = detect_underruns(numpy.zeros(100), 16)
	assert len(events) == 1
	assert events[0].start_frame == 0
	assert events[0].length == 100

#============================================

def test_events_sorted_and_disjoint() -> None:
	"""
	Ensure events are ordered by start and never overlap.
	"""
	samples = _noise_with_runs([(100, 20), (500, 16), (900, 40), (1990, 10)])
	events = detect_underruns(samples, 16)
	assert [event.start_frame for event in events] == [100, 500, 900]
	assert [event.length for event in events] == [20, 16, 40]
	for first, second in zip(events, events[1:]):
		assert first.end_frame <= second.start_frame

#============================================

def test_runs_carry_across_blocks() -> None:
	"""
	Ensure block-wise feeding finds the same events as one block.
	"""
	samples = _noise_with_runs([(5, 30), (300, 17), (1970, 30)])
	whole = detect_underruns(samples, 16)
	detector = UnderrunDetector(1, 16)
	for start in range(0, samples.size, 7):
		detector.update(samples[start:start + 7].reshape(-1, 1))
	assert detector.finish() == whole
	assert [event.start_frame for event in whole] == [5, 300, 1970]

#============================================

def test_channels_scanned_independently() -> None:
	"""
	Ensure a dropout on both channels yields one event per channel.
	"""
	left = _noise_with_runs([(200, 32)])
	right = _noise_with_runs([(200, 32)]) * -1.0
	right[600:620] = 0.0
	block = numpy.column_stack((left, right))
	detector = UnderrunDetector(2, 16)
	detector.update(block)
	events = detector.finish()
	assert [(event.channel, event.start_frame) for event in events] == [
		(0, 200), (1, 200), (1, 600),
	]

#============================================

def test_channel_label_applied() -> None:
	events = detect_underruns([0.0] * 20, 16, channel=3, sample_rate=1000)
	assert events[0].channel == 3
	assert events[0].duration == pytest.approx(0.02)

#============================================

@pytest.mark.parametrize("min_run", [0, -5])
def test_degenerate_minimum_rejected(min_run: int) -> None:
	"""
	Ensure a minimum run length below 1 is rejected.
	"""
	with pytest.raises(ConfigError):
		detect_underruns([0.0, 0.0], min_run)

#============================================

def test_empty_stream_has_no_events() -> None:
	assert detect_underruns([], 16) == []
