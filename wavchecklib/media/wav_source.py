#!/usr/bin/env python3

"""
Forward-only sample source backed by soundfile (libsndfile).
"""

import os

import numpy
import soundfile
from wavchecklib.core.errors import SourceReadError

DEFAULT_BLOCK_FRAMES = 65536

# bytes per stored sample for each libsndfile subtype
SUBTYPE_WIDTHS = {
	'PCM_U8': 1,
	'PCM_S8': 1,
	'PCM_16': 2,
	'PCM_24': 3,
	'PCM_32': 4,
	'FLOAT': 4,
	'DOUBLE': 8,
}

#============================================

class WavSource():
	"""
	Decode a wav file to normalized float64 blocks.

	Integer PCM of 8, 16, 24 and 32 bits is scaled so that full scale maps
	to +/-1.0. IEEE float data (format tag 3, plain or WAVE_FORMAT_EXTENSIBLE)
	is passed through unchanged.
	"""
	def __init__(self, path: str):
		self.path = path
		self._handle = None
		if not os.path.isfile(path):
			raise SourceReadError(f"could not open file: {path}")
		try:
			self._handle = soundfile.SoundFile(path, 'r')
		except (RuntimeError, OSError) as error:
			raise SourceReadError(f"could not open file: {path}: {error}")
		self.channels = self._handle.channels
		self.sample_rate = self._handle.samplerate
		self.subtype = self._handle.subtype
		self.sample_width = SUBTYPE_WIDTHS.get(self.subtype)
		self.total_frames = self._handle.frames
		if self.channels <= 0:
			self.close()
			raise SourceReadError("audio channel count must be positive")
		if self.sample_rate <= 0:
			self.close()
			raise SourceReadError("audio sample rate must be positive")
		if self.sample_width is None:
			self.close()
			raise SourceReadError(f"unsupported sample encoding: {self.subtype}")
		self._consumed = False

	#============================
	def __enter__(self):
		return self

	#============================
	def __exit__(self, exc_type, exc_value, traceback):
		self.close()
		return False

	#============================
	def close(self) -> None:
		if self._handle is not None:
			self._handle.close()
			self._handle = None
		return

	#============================
	@property
	def is_float(self) -> bool:
		return self.subtype in ('FLOAT', 'DOUBLE')

	#============================
	@property
	def duration(self) -> float:
		return self.total_frames / float(self.sample_rate)

	#============================
	def iter_blocks(self, block_frames: int = DEFAULT_BLOCK_FRAMES):
		"""
		Yield (frames, channels) float64 blocks, once, in order.
		"""
		if self._consumed:
			raise SourceReadError("sample source is forward-only and was already read")
		if self._handle is None:
			raise SourceReadError(f"sample source is closed: {self.path}")
		self._consumed = True
		while True:
			try:
				block = self._handle.read(block_frames, dtype='float64', always_2d=True)
			except (RuntimeError, OSError) as error:
				raise SourceReadError(f"could not read samples from {self.path}: {error}")
			if block.shape[0] == 0:
				break
			yield block
		return

	#============================
	def read_all(self) -> numpy.ndarray:
		blocks = list(self.iter_blocks())
		if len(blocks) == 0:
			return numpy.zeros((0, self.channels), dtype=numpy.float64)
		return numpy.concatenate(blocks, axis=0)
