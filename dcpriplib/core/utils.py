#!/usr/bin/env python3

import os
import shlex
import subprocess
import time
from decimal import Decimal
from decimal import ROUND_HALF_UP

#============================================

_QUIET_MODE = False
_COMMAND_REPORTER = None

#============================================

def set_quiet_mode(enabled: bool) -> None:
	global _QUIET_MODE
	_QUIET_MODE = bool(enabled)

#============================================

def is_quiet_mode() -> bool:
	return _QUIET_MODE

#============================================

def set_command_reporter(reporter) -> None:
	global _COMMAND_REPORTER
	_COMMAND_REPORTER = reporter

#============================================

def clear_command_reporter() -> None:
	global _COMMAND_REPORTER
	_COMMAND_REPORTER = None

#============================================

def _report(event: dict) -> None:
	if _COMMAND_REPORTER is not None:
		_COMMAND_REPORTER(event)

#============================================

def run_engine(argv: list) -> bool:
	"""
	Run one engine invocation to completion.

	Returns True only for a zero exit code. A missing executable or any
	other launch failure is reported as False like a non-zero exit.
	"""
	showcmd = shlex.join(argv)
	if not is_quiet_mode():
		print(f"CMD: '{showcmd}'")
	_report({'event': 'start', 'command': showcmd, 'returncode': None,
		'seconds': 0.0})
	t0 = time.time()
	output = subprocess.DEVNULL if is_quiet_mode() else None
	try:
		proc = subprocess.run(argv, stdin=subprocess.DEVNULL, stdout=output,
			stderr=output)
		returncode = proc.returncode
	except (OSError, ValueError):
		returncode = None
	_report({'event': 'finish', 'command': showcmd, 'returncode': returncode,
		'seconds': time.time() - t0})
	return returncode == 0

#============================================

def seconds_text(frames: int, frame_rate: int) -> str:
	"""
	Frames divided by the frame rate, as seconds with three decimals.

	Always uses a dot separator, whatever the host locale is.
	"""
	if frame_rate <= 0:
		raise ValueError("frame rate must be positive")
	seconds = Decimal(frames) / Decimal(frame_rate)
	seconds = seconds.quantize(Decimal('0.001'), rounding=ROUND_HALF_UP)
	return f"{seconds:.3f}"

#============================================

def replace_extension(filepath: str, suffix: str) -> str:
	"""
	Swap an .mxf extension (any case) for the given suffix.
	"""
	base, ext = os.path.splitext(filepath)
	if ext.lower() != '.mxf':
		base = filepath
	return base + suffix

#============================================

def remove_files(filepaths: list) -> None:
	for filepath in filepaths:
		if filepath and os.path.exists(filepath):
			os.remove(filepath)
