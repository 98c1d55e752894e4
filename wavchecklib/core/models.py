#!/usr/bin/env python3

"""
Value types produced by the analysis pass.

Positions and lengths are kept in frames; seconds are derived from the
sample rate carried alongside so that durations add up exactly.
"""

from dataclasses import dataclass

#============================================

@dataclass(frozen=True)
class UnderrunEvent:
	channel: int
	start_frame: int
	length: int
	value: float
	sample_rate: int

	@property
	def end_frame(self) -> int:
		return self.start_frame + self.length

	@property
	def start(self) -> float:
		return self.start_frame / float(self.sample_rate)

	@property
	def end(self) -> float:
		return self.end_frame / float(self.sample_rate)

	@property
	def duration(self) -> float:
		return self.length / float(self.sample_rate)

#============================================

@dataclass(frozen=True)
class LoudnessWindow:
	"""
	Short-term loudness at the end of one hop.

	start_frame and frame_count describe the hop the window closes; the
	loudness itself is integrated over the span that ends with that hop.
	"""
	index: int
	start_frame: int
	frame_count: int
	loudness: float
	sample_rate: int

	@property
	def end_frame(self) -> int:
		return self.start_frame + self.frame_count

	@property
	def start(self) -> float:
		return self.start_frame / float(self.sample_rate)

	@property
	def end(self) -> float:
		return self.end_frame / float(self.sample_rate)

	@property
	def duration(self) -> float:
		return self.frame_count / float(self.sample_rate)

#============================================

@dataclass(frozen=True)
class SilenceInterval:
	start_frame: int
	end_frame: int
	sample_rate: int

	@property
	def duration_frames(self) -> int:
		return self.end_frame - self.start_frame

	@property
	def start(self) -> float:
		return self.start_frame / float(self.sample_rate)

	@property
	def end(self) -> float:
		return self.end_frame / float(self.sample_rate)

	@property
	def duration(self) -> float:
		return self.duration_frames / float(self.sample_rate)

#============================================

@dataclass(frozen=True)
class SilenceResult:
	intervals: tuple
	silent_frames: int
	sample_rate: int

	@property
	def silent_duration(self) -> float:
		return self.silent_frames / float(self.sample_rate)

#============================================

@dataclass(frozen=True)
class AnalysisResult:
	underruns: tuple
	silences: tuple
	silent_frames: int
	total_frames: int
	sample_rate: int
	silence_percentage: float
	status: int

	@property
	def silent_duration(self) -> float:
		return self.silent_frames / float(self.sample_rate)

	@property
	def program_duration(self) -> float:
		return self.total_frames / float(self.sample_rate)

	@property
	def contains_underrun(self) -> bool:
		return len(self.underruns) > 0
