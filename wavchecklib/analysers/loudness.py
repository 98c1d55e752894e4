#!/usr/bin/env python3

"""
Short-term loudness (LUFS-S) meter.

K-weighted power is summed over channels, accumulated per hop, and the
mean square over the last integration span is reported once per hop.
"""

import collections
import math

import numpy
from wavchecklib.analysers.kweighting import KWeightingFilter
from wavchecklib.core.errors import ConfigError
from wavchecklib.core.models import LoudnessWindow
from wavchecklib.core.utils import frames_from_seconds

LOUDNESS_OFFSET = -0.691
DEFAULT_WINDOW_SECONDS = 3.0
DEFAULT_HOP_SECONDS = 0.1

#============================================

def mean_square_to_lufs(mean_square: float) -> float:
	if mean_square <= 0.0:
		return float('-inf')
	return LOUDNESS_OFFSET + 10.0 * math.log10(mean_square)

#============================================

def default_channel_weights(channels: int) -> list:
	return [1.0] * channels

#============================================

class LoudnessMeter():
	def __init__(self, sample_rate: int, channels: int,
		window_seconds: float = DEFAULT_WINDOW_SECONDS,
		hop_seconds: float = DEFAULT_HOP_SECONDS,
		channel_weights: list = None):
		if sample_rate <= 0:
			raise ConfigError("sample rate must be positive")
		if channels <= 0:
			raise ConfigError("channel count must be positive")
		if hop_seconds <= 0 or window_seconds <= 0:
			raise ConfigError("loudness window and hop must be positive")
		if hop_seconds > window_seconds:
			raise ConfigError("loudness hop must not exceed the window")
		if channel_weights is None:
			channel_weights = default_channel_weights(channels)
		if len(channel_weights) != channels:
			raise ConfigError(
				f"expected {channels} channel weights, got {len(channel_weights)}"
			)
		self.sample_rate = sample_rate
		self.channels = channels
		self.hop_frames = max(1, frames_from_seconds(hop_seconds, sample_rate))
		self.span_hops = max(1, int(round(window_seconds / hop_seconds)))
		self.weights = numpy.asarray(channel_weights, dtype=numpy.float64)
		self._filter = KWeightingFilter(sample_rate, channels)
		self._hops = collections.deque()
		self._span_energy = 0.0
		self._span_frames = 0
		self._live_hops = 0
		self._hop_energy = 0.0
		self._hop_fill = 0
		self._hop_start = 0
		self._windows = []

	#============================
	def update(self, block: numpy.ndarray) -> list:
		"""
		Feed one block of shape (frames, channels).

		Returns:
			list: LoudnessWindow objects completed by this block.
		"""
		if block.ndim == 1:
			block = block.reshape(-1, 1)
		if block.shape[1] != self.channels:
			raise RuntimeError(
				f"block has {block.shape[1]} channels, expected {self.channels}"
			)
		weighted = self._filter.process(block)
		power = numpy.square(weighted) @ self.weights
		completed = []
		position = 0
		total = power.shape[0]
		while position < total:
			take = min(self.hop_frames - self._hop_fill, total - position)
			self._hop_energy += float(numpy.sum(power[position:position + take]))
			self._hop_fill += take
			position += take
			if self._hop_fill == self.hop_frames:
				completed.append(self._close_hop())
		return completed

	#============================
	def finish(self) -> list:
		"""
		Flush a trailing partial hop and return every window.
		"""
		# nothing is reported until one full hop has been seen
		if self._hop_fill > 0 and len(self._windows) > 0:
			self._close_hop()
		return list(self._windows)

	#============================
	def _close_hop(self) -> LoudnessWindow:
		self._hops.append((self._hop_energy, self._hop_fill))
		self._span_energy += self._hop_energy
		self._span_frames += self._hop_fill
		if self._hop_energy > 0.0:
			self._live_hops += 1
		if len(self._hops) > self.span_hops:
			old_energy, old_frames = self._hops.popleft()
			self._span_energy -= old_energy
			self._span_frames -= old_frames
			if old_energy > 0.0:
				self._live_hops -= 1
		mean_square = self._current_mean_square()
		window = LoudnessWindow(
			index=len(self._windows),
			start_frame=self._hop_start,
			frame_count=self._hop_fill,
			loudness=mean_square_to_lufs(mean_square),
			sample_rate=self.sample_rate,
		)
		self._windows.append(window)
		self._hop_start += self._hop_fill
		self._hop_energy = 0.0
		self._hop_fill = 0
		return window

	#============================
	def _current_mean_square(self) -> float:
		if self._span_frames <= 0:
			return 0.0
		if self._live_hops == 0:
			# running subtraction can leave residue after loud hops drop out
			return 0.0
		mean_square = self._span_energy / self._span_frames
		if mean_square < 0.0:
			return 0.0
		return mean_square

#============================================

def measure_loudness(samples, sample_rate: int,
	window_seconds: float = DEFAULT_WINDOW_SECONDS,
	hop_seconds: float = DEFAULT_HOP_SECONDS,
	channel_weights: list = None) -> list:
	"""
	Measure short-term loudness over a complete sample array.

	Args:
		samples: Array of shape (frames,) or (frames, channels).
		sample_rate: Sample rate in Hz.

	Returns:
		list: LoudnessWindow per hop.
	"""
	data = numpy.asarray(samples, dtype=numpy.float64)
	if data.ndim == 1:
		data = data.reshape(-1, 1)
	meter = LoudnessMeter(sample_rate, data.shape[1], window_seconds,
		hop_seconds, channel_weights)
	meter.update(data)
	return meter.finish()
