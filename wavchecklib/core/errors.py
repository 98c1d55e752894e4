#!/usr/bin/env python3

# detection bits and failure codes never overlap
EXIT_SOURCE_ERROR = 4
EXIT_CONFIG_ERROR = 8

#============================================

class WavcheckError(RuntimeError):
	exit_code = EXIT_CONFIG_ERROR

#============================================

class SourceReadError(WavcheckError):
	"""
	The sample source could not be opened or decoded.
	"""
	exit_code = EXIT_SOURCE_ERROR

#============================================

class ConfigError(WavcheckError):
	"""
	A configuration value is outside its valid domain.
	"""
	exit_code = EXIT_CONFIG_ERROR
