#!/usr/bin/env python3

import json
import math
import os

from wavchecklib.core import utils
from wavchecklib.core.config import AnalysisConfig
from wavchecklib.core.models import AnalysisResult

#============================================

def silence_section(result: AnalysisResult, config: AnalysisConfig) -> dict:
	segments = []
	for interval in result.silences:
		segments.append({
			'start': interval.start,
			'end': interval.end,
			'duration': interval.duration,
			'startSample': interval.start_frame,
			'endSample': interval.end_frame,
			'durationSamples': interval.duration_frames,
		})
	return {
		'results': segments,
		'threshold': config.silence_lufs,
	}

#============================================

def underrun_section(result: AnalysisResult, config: AnalysisConfig) -> dict:
	events = []
	for event in result.underruns:
		events.append({
			'channel': event.channel,
			'start': event.start,
			'end': event.end,
			'duration': event.duration,
			'startSample': event.start_frame,
			'durationSamples': event.length,
			'value': event.value,
		})
	return {
		'results': events,
		'threshold': config.underrun_min_samples,
	}

#============================================

def build_report(result: AnalysisResult, config: AnalysisConfig) -> dict:
	"""
	Build the JSON document; empty detector sections are left out.

	Returns:
		dict: Report mapping, empty when nothing was found.
	"""
	report = {}
	if config.detect_silence and len(result.silences) > 0:
		report['silence'] = silence_section(result, config)
	if config.detect_underruns and len(result.underruns) > 0:
		report['underrun'] = underrun_section(result, config)
	if len(report) == 0:
		return report
	report['summary'] = {
		'status': result.status,
		'silencePercentage': result.silence_percentage,
		'silentDuration': result.silent_duration,
		'programDuration': result.program_duration,
	}
	return report

#============================================

def _json_safe(value):
	if isinstance(value, float) and not math.isfinite(value):
		return None
	return value

#============================================

def write_json_report(output_file: str, result: AnalysisResult,
	config: AnalysisConfig) -> bool:
	"""
	Write the report to disk.

	Returns:
		bool: True when a file was written.
	"""
	report = build_report(result, config)
	if len(report) == 0:
		utils.output("No findings, JSON output not written")
		return False
	if 'underrun' in report:
		for event in report['underrun']['results']:
			event['value'] = _json_safe(event['value'])
	os.makedirs(os.path.dirname(output_file) or '.', exist_ok=True)
	with open(output_file, 'w', encoding='utf-8') as handle:
		handle.write(json.dumps(report, indent=2))
		handle.write("\n")
	utils.output(f"Wrote JSON output to {output_file}")
	return True
