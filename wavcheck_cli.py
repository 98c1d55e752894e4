#!/usr/bin/env python3

"""
wavcheck_cli.py

Scan a wav file for buffer underruns and silence. The exit status is a
bit mask: 1 = underrun found, 2 = silence percentage threshold reached.
Processing failures exit with 4 (unreadable input) or 8 (bad settings).
"""

# Standard Library
import argparse
import sys

# local repo modules
from wavchecklib.core import report
from wavchecklib.core import utils
from wavchecklib.core.config import build_config
from wavchecklib.core.config import default_config
from wavchecklib.core.config import load_config
from wavchecklib.core.config import write_config_file
from wavchecklib.core.errors import ConfigError
from wavchecklib.core.errors import WavcheckError
from wavchecklib.core.pipeline import run_source
from wavchecklib.exporters.json_report import write_json_report
from wavchecklib.media.wav_source import WavSource

#============================================

def parse_args(argv: list = None) -> argparse.Namespace:
	"""
	Parse command-line arguments.

	Returns:
		argparse.Namespace: Parsed command-line arguments.
	"""
	parser = argparse.ArgumentParser(
		description="Detect underruns and silence in a wav file."
	)
	parser.add_argument('-i', '--input', dest='input_file', default=None,
		help="Input wav file path.")
	parser.add_argument('-u', '--underrun', dest='underrun', action='store_true',
		help="Enable underrun detection.")
	parser.add_argument('-n', '--samples', dest='samples', type=int, default=None,
		help="Minimum run of identical samples counted as an underrun (default 16).")
	parser.add_argument('-s', '--silence', dest='silence', action='store_true',
		help="Enable silence detection.")
	parser.add_argument('-m', '--min-silence', dest='min_silence', type=float,
		default=None, help="Minimum silence duration in seconds (default 0).")
	parser.add_argument('-l', '--lufs', dest='lufs', type=float, default=None,
		help="Silence threshold in LUFS-S (default -70).")
	parser.add_argument('-p', '--silence-percentage', dest='silence_percentage',
		type=float, default=None,
		help="Silence percentage that sets the silence status bit (default 99).")
	parser.add_argument('-c', '--config', dest='config_file', default=None,
		help="Path to a wavcheck config YAML.")
	parser.add_argument('-w', '--write-config', dest='write_config', default=None,
		help="Write the default config YAML to this path and exit.")
	parser.add_argument('-j', '--json', dest='json_file', default=None,
		help="Write findings as JSON to this path.")
	parser.add_argument('-d', '--debug', dest='debug', action='store_true',
		help="Print every loudness window.")
	parser.add_argument('-q', '--quiet', dest='quiet', action='store_true',
		help="Suppress console output.")
	parser.add_argument('-P', '--no-progress', dest='progress', action='store_false',
		help="Disable the progress bar.")
	parser.set_defaults(underrun=False)
	parser.set_defaults(silence=False)
	parser.set_defaults(debug=False)
	parser.set_defaults(quiet=False)
	parser.set_defaults(progress=True)
	args = parser.parse_args(argv)
	return args

#============================================

def build_settings(args: argparse.Namespace):
	"""
	Merge defaults, the optional config file and command-line flags.
	"""
	raw_config = None
	config_path = "[defaults]"
	if args.config_file is not None:
		config_path = args.config_file
		raw_config = load_config(config_path)
	config = build_config(raw_config, config_path)
	config = config.replace(
		detect_underruns=True if args.underrun else None,
		underrun_min_samples=args.samples,
		detect_silence=True if args.silence else None,
		min_silence=args.min_silence,
		silence_lufs=args.lufs,
		silence_percentage=args.silence_percentage,
		debug=True if args.debug else None,
	)
	config.validate()
	return config

#============================================

def run(args: argparse.Namespace) -> int:
	"""
	Run one analysis and return the process exit status.
	"""
	utils.set_quiet_mode(args.quiet)
	if args.write_config is not None:
		write_config_file(args.write_config, default_config())
		utils.output(f"Wrote default config: {args.write_config}")
		return 0
	if args.input_file is None:
		raise ConfigError("an input file is required (-i/--input)")
	config = build_settings(args)
	if not config.detect_underruns and not config.detect_silence:
		raise ConfigError("Neither underrun nor silence detection is active, exiting.")
	with WavSource(args.input_file) as source:
		report.print_header(source, config)
		analysis_pass = run_source(source, config, progress=args.progress)
	result = analysis_pass.result
	report.print_report(result, config, analysis_pass.windows)
	if args.json_file is not None:
		write_json_report(args.json_file, result, config)
	return result.status

#============================================

def main(argv: list = None) -> int:
	"""
	Main entry point.
	"""
	args = parse_args(argv)
	try:
		status = run(args)
	except WavcheckError as error:
		print(f"error: {error}", file=sys.stderr)
		return error.exit_code
	return status

#============================================

if __name__ == '__main__':
	sys.exit(main())
