#!/usr/bin/env python3

import numpy
from wavchecklib.core.errors import ConfigError
from wavchecklib.core.models import UnderrunEvent

#============================================

class _RunState():
	def __init__(self):
		self.value = 0.0
		self.start = 0
		self.length = 0

#============================================

class UnderrunDetector():
	"""
	Run-length scanner for exactly repeated sample values.

	Fed block by block; a run that crosses a block boundary is carried
	over and measured as one run. Each channel is scanned on its own.
	"""
	def __init__(self, channels: int, min_run_length: int = 16,
		sample_rate: int = 48000):
		if min_run_length < 1:
			raise ConfigError("underrun minimum run length must be at least 1")
		if channels < 1:
			raise ConfigError("channel count must be positive")
		self.channels = channels
		self.min_run_length = int(min_run_length)
		self.sample_rate = sample_rate
		self.frames_seen = 0
		self._states = [_RunState() for _ in range(channels)]
		self._events = [[] for _ in range(channels)]

	#============================
	def update(self, block: numpy.ndarray) -> list:
		"""
		Scan one block of shape (frames, channels).

		Returns:
			list: Events closed while scanning this block.
		"""
		if block.ndim == 1:
			block = block.reshape(-1, 1)
		if block.shape[1] != self.channels:
			raise RuntimeError(
				f"block has {block.shape[1]} channels, expected {self.channels}"
			)
		closed = []
		offset = self.frames_seen
		for channel in range(self.channels):
			closed.extend(self._scan_channel(channel, block[:, channel], offset))
		self.frames_seen += block.shape[0]
		return closed

	#============================
	def finish(self) -> list:
		"""
		Flush trailing runs and return every event found.

		Returns:
			list: Events ordered by start frame, then channel.
		"""
		for channel in range(self.channels):
			self._close_run(channel)
		events = []
		for channel_events in self._events:
			events.extend(channel_events)
		events.sort(key=lambda event: (event.start_frame, event.channel))
		return events

	#============================
	def _scan_channel(self, channel: int, column: numpy.ndarray, offset: int) -> list:
		if column.size == 0:
			return []
		state = self._states[channel]
		before = len(self._events[channel])
		breaks = numpy.flatnonzero(column[1:] != column[:-1]) + 1
		starts = numpy.concatenate((numpy.zeros(1, dtype=numpy.int64), breaks))
		lengths = numpy.diff(numpy.append(starts, column.size))
		first = 0
		if state.length > 0 and column[0] == state.value:
			state.length += int(lengths[0])
			if starts.size == 1:
				return []
			first = 1
		self._close_run(channel)
		last = starts.size - 1
		# only the interior runs can be closed inside this block
		interior = numpy.arange(first, last)
		qualified = interior[lengths[interior] >= self.min_run_length]
		for index in qualified:
			start = int(starts[index])
			self._events[channel].append(UnderrunEvent(
				channel=channel,
				start_frame=offset + start,
				length=int(lengths[index]),
				value=float(column[start]),
				sample_rate=self.sample_rate,
			))
		state.value = column[starts[last]]
		state.start = offset + int(starts[last])
		state.length = int(lengths[last])
		return self._events[channel][before:]

	#============================
	def _close_run(self, channel: int) -> None:
		state = self._states[channel]
		if state.length >= self.min_run_length:
			self._events[channel].append(UnderrunEvent(
				channel=channel,
				start_frame=state.start,
				length=state.length,
				value=float(state.value),
				sample_rate=self.sample_rate,
			))
		state.length = 0
		return

#============================================

def detect_underruns(samples, min_run_length: int = 16, channel: int = 0,
	sample_rate: int = 48000) -> list:
	"""
	Find runs of identical values in one channel.

	Args:
		samples: One-dimensional sequence of sample values.
		min_run_length: Shortest run reported.
		channel: Channel index stamped on the events.
		sample_rate: Sample rate stamped on the events.

	Returns:
		list: UnderrunEvent list ordered by start frame.
	"""
	column = numpy.asarray(samples, dtype=numpy.float64).reshape(-1)
	detector = UnderrunDetector(1, min_run_length, sample_rate)
	detector.update(column.reshape(-1, 1))
	events = detector.finish()
	if channel == 0:
		return events
	relabeled = []
	for event in events:
		relabeled.append(UnderrunEvent(channel=channel,
			start_frame=event.start_frame, length=event.length,
			value=event.value, sample_rate=event.sample_rate))
	return relabeled
