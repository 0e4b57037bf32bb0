#!/usr/bin/env python3

import argparse
import os
import sys
import yaml
from dcpriplib.core import utils
from dcpriplib.core.batch import BatchOrchestrator
from dcpriplib.core.errors import StructuralParseError
from dcpriplib.core.finder import composition_info
from dcpriplib.core.finder import find_compositions
from dcpriplib.core.settings import load_settings
from dcpriplib.dcp.cpl import parse_composition

#============================================

def parse_args(argv: list = None):
	"""
	Parse command-line arguments.
	"""
	parser = argparse.ArgumentParser(description="Convert DCP compositions to Matroska")
	parser.add_argument('-i', '--input', dest='inputs', nargs='+', required=True,
		help='CPL files, or folders to search for CPL files')
	parser.add_argument('-c', '--config', dest='config_file',
		help='yaml settings file')
	parser.add_argument('-o', '--output', dest='output_path',
		help='output folder, or "parent" for the folder above each DCP')
	parser.add_argument('-f', '--ffmpeg', dest='ffmpeg',
		help='ffmpeg executable to run')
	parser.add_argument('-2', '--force-2k', dest='downscale_4k', action='store_true',
		help='downscale 4K compositions to 2K')
	parser.add_argument('-r', '--resume', dest='resume', action='store_true',
		help='reuse reel files left by an earlier run')
	parser.add_argument('-q', '--quiet', dest='quiet', action='store_true',
		help='do not print engine commands or progress bars')
	parser.add_argument('-n', '--dry-run', dest='dry_run', action='store_true',
		help='parse compositions and print the reel plan only')
	parser.set_defaults(downscale_4k=None, resume=None)
	args = parser.parse_args(argv)
	return args

#============================================

def collect_compositions(inputs: list) -> list:
	compositions = []
	for path in inputs:
		if os.path.isdir(path):
			compositions.extend(find_compositions(path))
		else:
			compositions.append(composition_info(path))
	return compositions

#============================================

def build_settings(args):
	settings = load_settings(args.config_file)
	if args.output_path is not None:
		settings.output_path = args.output_path
	if args.ffmpeg is not None:
		settings.ffmpeg = args.ffmpeg
	if args.downscale_4k is not None:
		settings.downscale_4k = args.downscale_4k
	if args.resume is not None:
		settings.resume = args.resume
	return settings

#============================================

def dump_plan(compositions: list) -> int:
	plan = []
	failed = 0
	for info in compositions:
		try:
			plan.append(parse_composition(info.path).to_plan())
		except StructuralParseError as exc:
			plan.append({'file': info.path, 'error': str(exc)})
			failed += 1
	print(yaml.safe_dump(plan, sort_keys=False))
	return 1 if failed > 0 else 0

#============================================

def main(argv: list = None) -> int:
	args = parse_args(argv)
	utils.set_quiet_mode(args.quiet)
	settings = build_settings(args)
	compositions = collect_compositions(args.inputs)
	if len(compositions) == 0:
		print("no compositions found")
		return 1
	if args.dry_run:
		return dump_plan(compositions)
	batch = BatchOrchestrator(settings, compositions=compositions,
		status_callback=print)
	batch.process_all()
	report = batch.failed_contents()
	if report:
		print(report, end='')
		return 1
	return 0


if __name__ == '__main__':
	sys.exit(main())
