#!/usr/bin/env python3

"""
K-weighting filter design.

Both stages are designed from their analog parameters with a pre-warped
bilinear transform, so the coefficients follow the sample rate instead of
coming from the 48 kHz reference table.
"""

import math
from functools import lru_cache

import numpy
import scipy.signal

# RLB weighting: second-order high-pass
HIGHPASS_F0 = 38.13547087602444
HIGHPASS_Q = 0.5003270373238773

# head-related high-frequency shelf
SHELF_F0 = 1681.974450955533
SHELF_GAIN_DB = 3.999843853973347
SHELF_Q = 0.7071752369554196
SHELF_BAND_EXPONENT = 0.4996667741545416

#============================================

def highpass_coefficients(sample_rate: int) -> tuple:
	"""
	Coefficients (b, a) of the low-frequency roll-off stage.
	"""
	k = math.tan(math.pi * HIGHPASS_F0 / sample_rate)
	norm = 1.0 + k / HIGHPASS_Q + k * k
	b = [1.0, -2.0, 1.0]
	a = [
		1.0,
		2.0 * (k * k - 1.0) / norm,
		(1.0 - k / HIGHPASS_Q + k * k) / norm,
	]
	return (b, a)

#============================================

def shelf_coefficients(sample_rate: int) -> tuple:
	"""
	Coefficients (b, a) of the high-frequency boosting stage.
	"""
	k = math.tan(math.pi * SHELF_F0 / sample_rate)
	vh = 10.0 ** (SHELF_GAIN_DB / 20.0)
	vb = vh ** SHELF_BAND_EXPONENT
	norm = 1.0 + k / SHELF_Q + k * k
	b = [
		(vh + vb * k / SHELF_Q + k * k) / norm,
		2.0 * (k * k - vh) / norm,
		(vh - vb * k / SHELF_Q + k * k) / norm,
	]
	a = [
		1.0,
		2.0 * (k * k - 1.0) / norm,
		(1.0 - k / SHELF_Q + k * k) / norm,
	]
	return (b, a)

#============================================

@lru_cache(maxsize=16)
def _kweighting_sos(sample_rate: int) -> tuple:
	hp_b, hp_a = highpass_coefficients(sample_rate)
	sh_b, sh_a = shelf_coefficients(sample_rate)
	rows = (tuple(hp_b + hp_a), tuple(sh_b + sh_a))
	return rows

#============================================

def kweighting_sos(sample_rate: int) -> numpy.ndarray:
	"""
	Two-section SOS array for the full K-weighting cascade.

	Args:
		sample_rate: Sample rate in Hz.

	Returns:
		numpy.ndarray: Shape (2, 6), high-pass first.
	"""
	if sample_rate <= 0:
		raise RuntimeError("sample rate must be positive")
	return numpy.array(_kweighting_sos(int(sample_rate)), dtype=numpy.float64)

#============================================

class KWeightingFilter():
	"""
	Stateful K-weighting for block-wise processing of (frames, channels).
	"""
	def __init__(self, sample_rate: int, channels: int):
		self.sos = kweighting_sos(sample_rate)
		self.channels = channels
		self._zi = numpy.zeros((self.sos.shape[0], channels, 2), dtype=numpy.float64)

	#============================
	def process(self, block: numpy.ndarray) -> numpy.ndarray:
		if block.shape[0] == 0:
			return numpy.zeros((0, self.channels), dtype=numpy.float64)
		weighted, self._zi = scipy.signal.sosfilt(self.sos, block, axis=0, zi=self._zi)
		return weighted
