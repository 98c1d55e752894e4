#!/usr/bin/env python3

"""
Console reporting for an analysis pass.
"""

from wavchecklib.core import utils
from wavchecklib.core.config import AnalysisConfig
from wavchecklib.core.models import AnalysisResult
from wavchecklib.core.result import STATUS_SILENCE
from wavchecklib.core.result import STATUS_UNDERRUN

#============================================

def frame_digits(total_frames: int) -> int:
	return len(str(max(total_frames, 0)))

#============================================

def print_header(source, config: AnalysisConfig) -> None:
	utils.output(f"[+] sample rate:        {source.sample_rate}")
	utils.output(f"[+] channels:           {source.channels}")
	utils.output(f"[+] total samples:      {source.total_frames}")
	if config.detect_silence:
		utils.output(f"[+] silence threshold:  {config.silence_lufs} LUFS-S")
	if config.detect_underruns:
		utils.output(f"[+] underrun threshold: {config.underrun_min_samples} samples")
	return

#============================================

def underrun_lines(result: AnalysisResult) -> list:
	lines = []
	digits = frame_digits(result.total_frames)
	rate = result.sample_rate
	for event in result.underruns:
		label = utils.format_frame(event.end_frame, digits)
		lines.append(
			f"[{label}] UNDERRUN     : CH:{event.channel} - {event.length} samples "
			f"({event.duration:06.3f}s) {utils.frame_to_time(event.start_frame, rate)} "
			f"-> {utils.frame_to_time(event.end_frame, rate)}"
		)
	return lines

#============================================

def silence_lines(result: AnalysisResult) -> list:
	lines = []
	digits = frame_digits(result.total_frames)
	rate = result.sample_rate
	running = 0
	for interval in result.silences:
		running += interval.duration_frames
		pct = 0.0
		if result.total_frames > 0:
			pct = running * 100.0 / result.total_frames
		start_label = utils.format_frame(interval.start_frame, digits)
		end_label = utils.format_frame(interval.end_frame, digits)
		lines.append(
			f"[{start_label}] SILENCE START: "
			f"@ {utils.frame_to_time(interval.start_frame, rate)}"
		)
		lines.append(
			f"[{end_label}] SILENCE END  : "
			f"@ {utils.frame_to_time(interval.end_frame, rate)} "
			f"({pct:04.3f}% of total)"
		)
	return lines

#============================================

def debug_lines(windows: list, total_frames: int) -> list:
	lines = []
	digits = frame_digits(total_frames)
	for window in windows:
		label = utils.format_frame(window.end_frame, digits)
		lines.append(
			f"[{label}] DEBUG        : LUFS-S: {utils.format_lufs(window.loudness)} "
			f"@ {utils.frame_to_time(window.end_frame, window.sample_rate)}"
		)
	return lines

#============================================

def summary_lines(result: AnalysisResult, config: AnalysisConfig) -> list:
	lines = []
	lines.append("")
	lines.append("Summary")
	lines.append(f"Duration: {utils.format_timestamp(result.program_duration)} "
		f"({result.program_duration:.3f}s)")
	lines.append(f"Silence: {utils.format_timestamp(result.silent_duration)} "
		f"({result.silence_percentage:.2f}%)")
	lines.append(f"Silence ranges: {len(result.silences)}")
	if config.detect_underruns:
		lines.append(f"Underruns: {len(result.underruns)}")
	flags = []
	if result.status & STATUS_UNDERRUN:
		flags.append("underrun")
	if result.status & STATUS_SILENCE:
		flags.append("silence")
	flag_text = ", ".join(flags) if len(flags) > 0 else "clean"
	lines.append(f"Status: {result.status:#06b} ({flag_text})")
	return lines

#============================================

def print_report(result: AnalysisResult, config: AnalysisConfig,
	windows: list = None) -> None:
	"""
	Print detector findings and the summary.

	Args:
		result: Finished analysis result.
		config: Configuration used for the pass.
		windows: Loudness windows, printed only in debug mode.
	"""
	if config.debug and windows is not None:
		for line in debug_lines(windows, result.total_frames):
			utils.output(line)
	if config.detect_underruns:
		for line in underrun_lines(result):
			utils.output(line)
	if config.detect_silence:
		for line in silence_lines(result):
			utils.output(line)
	for line in summary_lines(result, config):
		utils.output(line)
	return
