#!/usr/bin/env python3

import numpy
from tqdm import tqdm
from wavchecklib.analysers.loudness import LoudnessMeter
from wavchecklib.analysers.silence import classify_silence
from wavchecklib.analysers.underrun import UnderrunDetector
from wavchecklib.core import utils
from wavchecklib.core.config import AnalysisConfig
from wavchecklib.core.models import AnalysisResult
from wavchecklib.core.result import aggregate

#============================================

class AnalysisPass():
	"""
	Single forward pass feeding both detectors block by block.

	The loudness meter always runs so the silence percentage can be
	reported; the underrun detector only runs when requested.
	"""
	def __init__(self, sample_rate: int, channels: int, config: AnalysisConfig):
		config.validate()
		self.config = config
		self.sample_rate = sample_rate
		self.channels = channels
		self.frames_seen = 0
		self.underrun_detector = None
		if config.detect_underruns:
			self.underrun_detector = UnderrunDetector(channels,
				config.underrun_min_samples, sample_rate)
		weights = None
		if config.channel_weights is not None:
			weights = list(config.channel_weights)
		self.loudness_meter = LoudnessMeter(sample_rate, channels,
			window_seconds=config.window_seconds,
			hop_seconds=config.hop_seconds,
			channel_weights=weights)
		self.windows = []
		self.result = None

	#============================
	def feed(self, block: numpy.ndarray) -> None:
		if self.result is not None:
			raise RuntimeError("analysis pass already finished")
		if block.ndim == 1:
			block = block.reshape(-1, 1)
		if self.underrun_detector is not None:
			self.underrun_detector.update(block)
		self.loudness_meter.update(block)
		self.frames_seen += block.shape[0]
		return

	#============================
	def finish(self) -> AnalysisResult:
		if self.result is not None:
			return self.result
		underruns = []
		if self.underrun_detector is not None:
			underruns = self.underrun_detector.finish()
		self.windows = self.loudness_meter.finish()
		silence = classify_silence(self.windows, self.config.silence_lufs,
			self.config.min_silence, self.sample_rate)
		self.result = aggregate(underruns, silence, self.frames_seen,
			self.sample_rate, self.config)
		return self.result

#============================================

def run_source(source, config: AnalysisConfig, progress: bool = False,
	block_frames: int = 65536) -> AnalysisPass:
	"""
	Drive an AnalysisPass over a sample source.

	Args:
		source: Object with sample_rate, channels, total_frames and
			iter_blocks(block_frames).
		config: Analysis configuration.
		progress: Show a tqdm progress bar over frames.

	Returns:
		AnalysisPass: Finished pass with result and loudness windows.
	"""
	analysis_pass = AnalysisPass(source.sample_rate, source.channels, config)
	show_progress = progress and not utils.is_quiet_mode()
	with tqdm(total=source.total_frames, unit='frames',
		disable=not show_progress) as progress_bar:
		for block in source.iter_blocks(block_frames):
			analysis_pass.feed(block)
			progress_bar.update(block.shape[0])
	analysis_pass.finish()
	return analysis_pass

#============================================

def analyse_source(source, config: AnalysisConfig, progress: bool = False) -> AnalysisResult:
	return run_source(source, config, progress=progress).result

#============================================

def analyse_samples(samples, sample_rate: int, config: AnalysisConfig) -> AnalysisResult:
	"""
	Analyse an in-memory array of shape (frames,) or (frames, channels).
	"""
	data = numpy.asarray(samples, dtype=numpy.float64)
	if data.ndim == 1:
		data = data.reshape(-1, 1)
	analysis_pass = AnalysisPass(sample_rate, data.shape[1], config)
	analysis_pass.feed(data)
	return analysis_pass.finish()
