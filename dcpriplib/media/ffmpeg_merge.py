#!/usr/bin/env python3

import os
from dcpriplib.core import utils
from dcpriplib.media.engine import EngineCommand

#============================================

class Merger():
	def __init__(self, engine):
		self.engine = engine

	#============================
	def merge(self, video_file: str, audio_file: str, out_file: str) -> bool:
		"""
		Mux a rendered video and audio pair without re-encoding.

		The engine exit code is not trusted: the merge only counts when both
		inputs are still there and the output exists, and only then are the
		inputs deleted. Otherwise everything is left in place.
		"""
		cmd = EngineCommand()
		cmd.add_input(video_file)
		cmd.add_input(audio_file)
		cmd.map_stream('0:v')
		cmd.map_stream('1:a')
		cmd.copy_streams()
		cmd.output(out_file)
		self.engine.run(cmd)
		if not (os.path.exists(video_file) and os.path.exists(audio_file)):
			return False
		if not os.path.exists(out_file):
			return False
		utils.remove_files([video_file, audio_file])
		return True
