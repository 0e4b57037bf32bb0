#!/usr/bin/env python3

import os
from dcpriplib.core import utils
from dcpriplib.core.errors import UnresolvedAssetError
from dcpriplib.core.models import Reel
from dcpriplib.media.engine import EngineCommand

#============================================

OUTPUT_SUFFIX = '.mkv'

#============================================

class ReelAudioTranscoder():
	def __init__(self, engine, settings):
		self.engine = engine
		self.settings = settings

	#============================
	def render(self, reel: Reel):
		if not isinstance(reel, Reel):
			raise UnresolvedAssetError("reel audio track is not resolved")
		out_file = utils.replace_extension(reel.audio_file, OUTPUT_SUFFIX)
		if self.settings.resume and os.path.exists(out_file):
			return out_file
		# audio has its own entry point, only the length is shared with video
		start = utils.seconds_text(reel.audio_entry_point, reel.frame_rate)
		length = utils.seconds_text(reel.duration, reel.frame_rate)
		cmd = EngineCommand()
		cmd.add_input(reel.audio_file)
		cmd.seek(start)
		cmd.duration(length)
		cmd.audio_codec(self.settings.audio_codec)
		cmd.output(out_file)
		if not self.engine.run(cmd):
			return None
		return out_file
