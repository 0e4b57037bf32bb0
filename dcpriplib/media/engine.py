#!/usr/bin/env python3

import re
from dcpriplib.core import utils
from dcpriplib.core.errors import EngineCommandError

#============================================

INPUT_OPTIONS = ('-r', '-ss', '-t')
OUTPUT_OPTIONS = ('-ss', '-t', '-vf', '-filter_complex', '-map',
	'-c:v', '-c:a', '-c', '-pix_fmt', '-crf')
VERBOSITY_ARGS = ['-v', 'error', '-stats']

NAME_PATTERN = re.compile(r'^[A-Za-z0-9_.\-]+$')
SECONDS_PATTERN = re.compile(r'^[0-9]+\.[0-9]{3}$')
MAX_CRF = 63

#============================================

def _check_name(kind: str, value: str) -> str:
	if not isinstance(value, str) or NAME_PATTERN.match(value) is None:
		raise EngineCommandError(f"invalid {kind}: {value!r}")
	return value

#============================================

def _check_seconds(value: str) -> str:
	if not isinstance(value, str) or SECONDS_PATTERN.match(value) is None:
		raise EngineCommandError(f"time must look like 12.345, got {value!r}")
	return value

#============================================

def _check_text(kind: str, value: str) -> str:
	if not isinstance(value, str) or value.strip() == '':
		raise EngineCommandError(f"{kind} must be a non-empty string")
	if '\n' in value or '\r' in value:
		raise EngineCommandError(f"{kind} must be a single line")
	return value

#============================================

class EngineCommand():
	"""
	Arguments for one ffmpeg run, built from a fixed option set.

	Every setter validates its value and returns the command so calls can
	be chained. to_args() gives the argv tail without the executable.
	"""
	def __init__(self):
		self.inputs = []
		self.options = []
		self.output_file = None

	#============================
	def _add_option(self, flag: str, value: str) -> 'EngineCommand':
		if flag not in OUTPUT_OPTIONS:
			raise EngineCommandError(f"unknown output option {flag}")
		self.options.append((flag, value))
		return self

	#============================
	def _input_option(self, input_options: list, flag: str,
		value: str) -> None:
		if flag not in INPUT_OPTIONS:
			raise EngineCommandError(f"unknown input option {flag}")
		input_options.append((flag, value))

	#============================
	def add_input(self, path: str, seek: str = None, frame_rate: int = None,
		duration: str = None) -> 'EngineCommand':
		"""
		Add an input file with options that apply to reading it.

		A duration given here limits how much input is read, before any
		filter retimes the frames.
		"""
		path = _check_text('input path', path)
		input_options = []
		if frame_rate is not None:
			if isinstance(frame_rate, bool) or not isinstance(frame_rate, int) \
				or frame_rate <= 0:
				raise EngineCommandError(f"invalid input frame rate {frame_rate!r}")
			self._input_option(input_options, '-r', str(frame_rate))
		if seek is not None:
			self._input_option(input_options, '-ss', _check_seconds(seek))
		if duration is not None:
			self._input_option(input_options, '-t', _check_seconds(duration))
		self.inputs.append((input_options, path))
		return self

	#============================
	def seek(self, seconds: str) -> 'EngineCommand':
		return self._add_option('-ss', _check_seconds(seconds))

	#============================
	def duration(self, seconds: str) -> 'EngineCommand':
		return self._add_option('-t', _check_seconds(seconds))

	#============================
	def video_filter(self, expression: str) -> 'EngineCommand':
		return self._add_option('-vf', _check_text('video filter', expression))

	#============================
	def filter_complex(self, expression: str, output_label: str) -> 'EngineCommand':
		self._add_option('-filter_complex',
			_check_text('filter graph', expression))
		return self._add_option('-map', f"[{_check_name('label', output_label)}]")

	#============================
	def map_stream(self, specifier: str) -> 'EngineCommand':
		if re.match(r'^[0-9]+(:[avs])?$', specifier or '') is None:
			raise EngineCommandError(f"invalid stream specifier {specifier!r}")
		return self._add_option('-map', specifier)

	#============================
	def video_codec(self, codec: str) -> 'EngineCommand':
		return self._add_option('-c:v', _check_name('video codec', codec))

	#============================
	def audio_codec(self, codec: str) -> 'EngineCommand':
		return self._add_option('-c:a', _check_name('audio codec', codec))

	#============================
	def copy_streams(self) -> 'EngineCommand':
		return self._add_option('-c', 'copy')

	#============================
	def pixel_format(self, pixel_format: str) -> 'EngineCommand':
		return self._add_option('-pix_fmt', _check_name('pixel format', pixel_format))

	#============================
	def quality(self, crf: int) -> 'EngineCommand':
		if isinstance(crf, bool) or not isinstance(crf, int) or not 0 <= crf <= MAX_CRF:
			raise EngineCommandError(f"crf must be an integer 0-{MAX_CRF}, got {crf!r}")
		return self._add_option('-crf', str(crf))

	#============================
	def output(self, path: str) -> 'EngineCommand':
		self.output_file = _check_text('output path', path)
		return self

	#============================
	def option_values(self, flag: str) -> list:
		return [value for option, value in self.options if option == flag]

	#============================
	def to_args(self) -> list:
		if len(self.inputs) == 0:
			raise EngineCommandError("engine command has no input")
		if self.output_file is None:
			raise EngineCommandError("engine command has no output")
		args = ['-y']
		for input_options, path in self.inputs:
			for flag, value in input_options:
				args += [flag, value]
			args += ['-i', path]
		for flag, value in self.options:
			args += [flag, value]
		args += VERBOSITY_ARGS
		args.append(self.output_file)
		return args

#============================================

class FfmpegEngine():
	"""
	Runs EngineCommands as blocking ffmpeg child processes.

	A set cancel_event stops new launches; a run already started is waited
	for, so stopping it at once needs the process group to be killed.
	"""
	def __init__(self, executable: str = 'ffmpeg', cancel_event=None):
		self.executable = executable
		self.cancel_event = cancel_event

	#============================
	def cancelled(self) -> bool:
		return self.cancel_event is not None and self.cancel_event.is_set()

	#============================
	def run(self, command: EngineCommand) -> bool:
		if self.cancelled():
			if not utils.is_quiet_mode():
				print(f"cancelled, not writing {command.output_file}")
			return False
		argv = [self.executable] + command.to_args()
		return utils.run_engine(argv)
