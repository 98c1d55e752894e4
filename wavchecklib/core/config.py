#!/usr/bin/env python3

"""
Analysis configuration: defaults, optional YAML file, validation.

Precedence is defaults, then the config file, then command-line
overrides applied by the caller through AnalysisConfig.replace().
"""

import dataclasses
import math
import os

import yaml
from wavchecklib.core.errors import ConfigError

CONFIG_VERSION = 1

#============================================

@dataclasses.dataclass(frozen=True)
class AnalysisConfig():
	detect_underruns: bool = False
	underrun_min_samples: int = 16
	detect_silence: bool = False
	min_silence: float = 0.0
	silence_lufs: float = -70.0
	silence_percentage: float = 99.0
	debug: bool = False
	window_seconds: float = 3.0
	hop_seconds: float = 0.1
	channel_weights: tuple = None

	#============================
	def replace(self, **changes) -> 'AnalysisConfig':
		# None means "not given on the command line"
		given = {key: value for key, value in changes.items() if value is not None}
		return dataclasses.replace(self, **given)

	#============================
	def validate(self) -> None:
		"""
		Raise ConfigError for values outside their domain.
		"""
		if isinstance(self.underrun_min_samples, bool) or self.underrun_min_samples < 1:
			raise ConfigError("underrun minimum samples must be at least 1")
		if not math.isfinite(self.min_silence) or self.min_silence < 0:
			raise ConfigError("minimum silence duration must be 0 or positive")
		if not math.isfinite(self.silence_lufs):
			raise ConfigError("silence threshold must be a finite LUFS-S value")
		if not math.isfinite(self.silence_percentage):
			raise ConfigError("silence percentage must be a number")
		if self.silence_percentage < 0 or self.silence_percentage > 100:
			raise ConfigError("silence percentage must be between 0 and 100")
		if self.window_seconds <= 0:
			raise ConfigError("loudness window must be positive")
		if self.hop_seconds <= 0:
			raise ConfigError("loudness hop must be positive")
		if self.hop_seconds > self.window_seconds:
			raise ConfigError("loudness hop must be <= loudness window")
		if self.channel_weights is not None:
			for weight in self.channel_weights:
				if not math.isfinite(weight) or weight < 0:
					raise ConfigError("channel weights must be 0 or positive")
		return

#============================================

def coerce_bool(value, config_path: str, key_path: str) -> bool:
	if isinstance(value, bool):
		return value
	if isinstance(value, int):
		return bool(value)
	if isinstance(value, str):
		normalized = value.strip().lower()
		if normalized in ("true", "yes", "1", "on"):
			return True
		if normalized in ("false", "no", "0", "off"):
			return False
	raise ConfigError(f"config {config_path}: {key_path} must be a boolean")

#============================================

def coerce_float(value, config_path: str, key_path: str) -> float:
	if isinstance(value, bool):
		raise ConfigError(f"config {config_path}: {key_path} must be a number")
	if isinstance(value, (int, float)):
		return float(value)
	if isinstance(value, str):
		try:
			return float(value)
		except ValueError:
			raise ConfigError(f"config {config_path}: {key_path} must be a number")
	raise ConfigError(f"config {config_path}: {key_path} must be a number")

#============================================

def coerce_int(value, config_path: str, key_path: str) -> int:
	if isinstance(value, bool):
		raise ConfigError(f"config {config_path}: {key_path} must be an integer")
	if isinstance(value, int):
		return value
	if isinstance(value, float) and value.is_integer():
		return int(value)
	if isinstance(value, str):
		try:
			return int(value.strip())
		except ValueError:
			raise ConfigError(f"config {config_path}: {key_path} must be an integer")
	raise ConfigError(f"config {config_path}: {key_path} must be an integer")

#============================================

def coerce_weights(value, config_path: str, key_path: str) -> tuple:
	if value is None:
		return None
	if not isinstance(value, (list, tuple)) or len(value) == 0:
		raise ConfigError(f"config {config_path}: {key_path} must be a non-empty list")
	return tuple(coerce_float(item, config_path, key_path) for item in value)

#============================================

def default_config() -> dict:
	"""
	Build the default config dictionary.

	Returns:
		dict: Default configuration values.
	"""
	defaults = AnalysisConfig()
	return {
		'wavcheck': CONFIG_VERSION,
		'settings': {
			'underrun': {
				'enabled': defaults.detect_underruns,
				'min_samples': defaults.underrun_min_samples,
			},
			'silence': {
				'enabled': defaults.detect_silence,
				'min_silence': defaults.min_silence,
				'threshold_lufs': defaults.silence_lufs,
				'percentage': defaults.silence_percentage,
			},
			'loudness': {
				'window_seconds': defaults.window_seconds,
				'hop_seconds': defaults.hop_seconds,
				'channel_weights': None,
			},
			'debug': defaults.debug,
		},
	}

#============================================

def load_config(config_path: str) -> dict:
	"""
	Load a config file from disk.

	Args:
		config_path: Config file path.

	Returns:
		dict: Parsed config dictionary.
	"""
	if not os.path.isfile(config_path):
		raise ConfigError(f"config file not found: {config_path}")
	try:
		with open(config_path, 'r', encoding='utf-8') as handle:
			data = yaml.safe_load(handle)
	except yaml.YAMLError as error:
		raise ConfigError(f"config {config_path}: invalid yaml: {error}")
	if not isinstance(data, dict):
		raise ConfigError("config file must be a mapping")
	if data.get('wavcheck') != CONFIG_VERSION:
		raise ConfigError(f"config file must set wavcheck: {CONFIG_VERSION}")
	return data

#============================================

def build_config(config: dict = None, config_path: str = "[defaults]") -> AnalysisConfig:
	"""
	Normalize a raw config mapping into an AnalysisConfig.

	Args:
		config: Raw config dictionary, None for defaults only.
		config_path: Config file path used in error messages.

	Returns:
		AnalysisConfig: Settings with defaults filled in.
	"""
	settings = default_config()['settings']
	overrides = {}
	if isinstance(config, dict):
		overrides = config.get('settings') or {}
	if not isinstance(overrides, dict):
		raise ConfigError(f"config {config_path}: settings must be a mapping")
	underrun = overrides.get('underrun') or {}
	silence = overrides.get('silence') or {}
	loudness = overrides.get('loudness') or {}
	detect_underruns = coerce_bool(underrun.get('enabled',
		settings['underrun']['enabled']), config_path,
		"settings.underrun.enabled")
	min_samples = coerce_int(underrun.get('min_samples',
		settings['underrun']['min_samples']), config_path,
		"settings.underrun.min_samples")
	detect_silence = coerce_bool(silence.get('enabled',
		settings['silence']['enabled']), config_path,
		"settings.silence.enabled")
	min_silence = coerce_float(silence.get('min_silence',
		settings['silence']['min_silence']), config_path,
		"settings.silence.min_silence")
	silence_lufs = coerce_float(silence.get('threshold_lufs',
		settings['silence']['threshold_lufs']), config_path,
		"settings.silence.threshold_lufs")
	silence_percentage = coerce_float(silence.get('percentage',
		settings['silence']['percentage']), config_path,
		"settings.silence.percentage")
	window_seconds = coerce_float(loudness.get('window_seconds',
		settings['loudness']['window_seconds']), config_path,
		"settings.loudness.window_seconds")
	hop_seconds = coerce_float(loudness.get('hop_seconds',
		settings['loudness']['hop_seconds']), config_path,
		"settings.loudness.hop_seconds")
	channel_weights = coerce_weights(loudness.get('channel_weights',
		settings['loudness']['channel_weights']), config_path,
		"settings.loudness.channel_weights")
	debug = coerce_bool(overrides.get('debug', settings['debug']),
		config_path, "settings.debug")
	return AnalysisConfig(
		detect_underruns=detect_underruns,
		underrun_min_samples=min_samples,
		detect_silence=detect_silence,
		min_silence=min_silence,
		silence_lufs=silence_lufs,
		silence_percentage=silence_percentage,
		debug=debug,
		window_seconds=window_seconds,
		hop_seconds=hop_seconds,
		channel_weights=channel_weights,
	)

#============================================

def write_config_file(config_path: str, config: dict) -> None:
	os.makedirs(os.path.dirname(config_path) or '.', exist_ok=True)
	with open(config_path, 'w', encoding='utf-8') as handle:
		yaml.safe_dump(config, handle, sort_keys=False)
	return
