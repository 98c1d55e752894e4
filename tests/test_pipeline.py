#!/usr/bin/env python3

"""
End-to-end tests for the analysis pass.
"""

# Standard Library
import os
import sys
import tempfile

# PIP3 modules
import numpy
import pytest

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
	sys.path.insert(0, REPO_ROOT)
TESTS_DIR = os.path.abspath(os.path.dirname(__file__))
if TESTS_DIR not in sys.path:
	sys.path.insert(0, TESTS_DIR)
from wav_utils import noise
from wav_utils import sine
from wav_utils import write_float_wav

# local repo modules
from wavchecklib.core.config import AnalysisConfig
from wavchecklib.core.errors import ConfigError
from wavchecklib.core.pipeline import AnalysisPass
from wavchecklib.core.pipeline import analyse_samples
from wavchecklib.core.pipeline import analyse_source
from wavchecklib.core.pipeline import run_source
from wavchecklib.media.wav_source import WavSource

RATE = 8000

#============================================

def _scenario_a() -> numpy.ndarray:
	# 9.9 s of digital silence, then 0.1 s of tone near -10 LUFS-S
	silence = numpy.zeros(int(9.9 * RATE))
	tone = sine(1000.0, 0.1, RATE, amplitude=0.447)
	return numpy.concatenate((silence, tone))

#============================================

def _scenario_b() -> numpy.ndarray:
	samples = noise(5.0, RATE, amplitude=0.5)
	samples[12000:12020] = 0.125
	return samples

#============================================

def test_scenario_a_mostly_silent_file() -> None:
	"""
	Ensure 99% silence trips the silence bit at threshold 99.
	"""
	config = AnalysisConfig(detect_silence=True, silence_percentage=99.0)
	result = analyse_samples(_scenario_a(), RATE, config)
	assert result.total_frames == 10 * RATE
	assert result.silence_percentage == pytest.approx(99.0)
	assert result.status == 0b0010
	assert len(result.silences) == 1
	assert result.silences[0].start_frame == 0
	assert result.silences[0].end == pytest.approx(9.9)

#============================================

def test_scenario_a_strictly_above_boundary_clears_bit() -> None:
	config = AnalysisConfig(detect_silence=True, silence_percentage=99.5)
	result = analyse_samples(_scenario_a(), RATE, config)
	assert result.status == 0

#============================================

def test_scenario_b_underrun_only() -> None:
	"""
	Ensure one 20-sample run with silence detection off gives 0b0001.
	"""
	config = AnalysisConfig(detect_underruns=True, detect_silence=False)
	result = analyse_samples(_scenario_b(), RATE, config)
	assert result.status == 0b0001
	assert len(result.underruns) == 1
	assert result.underruns[0].start_frame == 12000
	assert result.underruns[0].length == 20
	assert result.silences == ()

#============================================

def test_scenario_c_silence_only() -> None:
	"""
	Ensure a fully silent file sets only the silence bit.
	"""
	config = AnalysisConfig(detect_underruns=False, detect_silence=True)
	result = analyse_samples(numpy.zeros((RATE * 4, 2)), RATE, config)
	assert result.status == 0b0010
	assert result.underruns == ()
	assert result.silent_frames == result.total_frames
	assert result.silence_percentage == 100.0

#============================================

def test_all_zero_stream_is_fully_silent_with_partial_hop() -> None:
	config = AnalysisConfig(detect_silence=True)
	result = analyse_samples(numpy.zeros(RATE * 2 + 123), RATE, config)
	assert result.silence_percentage == 100.0

#============================================

def test_rerun_is_identical() -> None:
	"""
	Ensure the same input and config produce an identical result.
	"""
	config = AnalysisConfig(detect_underruns=True, detect_silence=True)
	samples = numpy.concatenate((_scenario_b(), numpy.zeros(RATE * 2)))
	first = analyse_samples(samples, RATE, config)
	second = analyse_samples(samples.copy(), RATE, config)
	assert first == second
	assert first.status == 0b0001

#============================================

def test_invalid_config_rejected_before_processing() -> None:
	config = AnalysisConfig(detect_underruns=True, underrun_min_samples=0)
	with pytest.raises(ConfigError):
		AnalysisPass(RATE, 1, config)

#============================================

def test_source_pass_matches_in_memory_pass() -> None:
	"""
	Ensure block-wise reading of a wav gives the in-memory result.
	"""
	samples = numpy.concatenate((numpy.zeros(RATE * 3), noise(2.0, RATE, 0.25)))
	samples[RATE * 4:RATE * 4 + 40] = 0.5
	config = AnalysisConfig(detect_underruns=True, detect_silence=True,
		silence_percentage=50.0)
	with tempfile.TemporaryDirectory() as temp_dir:
		wav_path = write_float_wav(os.path.join(temp_dir, "mix.wav"), samples, RATE)
		with WavSource(wav_path) as source:
			decoded = source.read_all()
		with WavSource(wav_path) as source:
			analysis_pass = run_source(source, config, progress=False,
				block_frames=1000)
		with WavSource(wav_path) as source:
			from_source = analyse_source(source, config)
	from_memory = analyse_samples(decoded, RATE, config)
	result = analysis_pass.result
	assert result.status == from_memory.status == from_source.status
	assert result.underruns == from_memory.underruns
	assert result.silent_frames == from_memory.silent_frames
	assert len(analysis_pass.windows) == 50
	# leading zeros form one underrun on top of the injected run
	assert [event.start_frame for event in result.underruns] == [0, RATE * 4]
	assert result.status == 0b0011
