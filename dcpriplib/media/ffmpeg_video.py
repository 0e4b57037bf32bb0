#!/usr/bin/env python3

import os
from dcpriplib.core import utils
from dcpriplib.core.errors import UnresolvedAssetError
from dcpriplib.core.models import Reel
from dcpriplib.media.engine import EngineCommand

#============================================

OUTPUT_SUFFIX = '.mkv'
LEFT_SUFFIX = '_L.mkv'
RIGHT_SUFFIX = '_R.mkv'
DOWNSCALE_FILTER = 'scale=iw/2:ih/2'
SUBSAMPLED_PIXEL_FORMAT = 'yuv420p'

#============================================

def eye_filter(frame_rate: int, left: bool) -> str:
	"""
	Filter keeping one eye of a temporally interleaved stereo stream.

	Left eye frames sit at even positions, right eye frames at odd ones.
	Kept frames are retimed to the per-eye rate and squeezed to half width.
	"""
	if left:
		select = 'select=not(mod(n\\,2))'
	else:
		select = 'select=mod(n\\,2)'
	return f"{select},setpts=N/{frame_rate}/TB,scale=iw/2:ih,setsar=1:1"

#============================================

class ReelVideoTranscoder():
	def __init__(self, engine, settings):
		self.engine = engine
		self.settings = settings

	#============================
	def render(self, reel: Reel, extra_filter: str = None):
		"""
		Encode the video track of a reel to Matroska next to its source.

		Returns the output path, or None when the engine failed.
		"""
		if not isinstance(reel, Reel):
			raise UnresolvedAssetError("reel video track is not resolved")
		out_file = utils.replace_extension(reel.video_file, OUTPUT_SUFFIX)
		if self._reusable(out_file):
			return out_file
		if reel.stereoscopic:
			return self._render_stereoscopic(reel, out_file, extra_filter)
		start = utils.seconds_text(reel.video_entry_point, reel.frame_rate)
		length = utils.seconds_text(reel.duration, reel.frame_rate)
		cmd = EngineCommand()
		cmd.add_input(reel.video_file, seek=start)
		cmd.duration(length)
		cmd.video_codec(self.settings.video_codec)
		if self.settings.chroma_subsampling:
			cmd.pixel_format(SUBSAMPLED_PIXEL_FORMAT)
		if extra_filter:
			cmd.video_filter(extra_filter)
		cmd.quality(self.settings.crf)
		cmd.output(out_file)
		if not self.engine.run(cmd):
			return None
		return out_file

	#============================
	def render_2k(self, reel: Reel, is_4k: bool):
		"""
		Same as render, but halves both dimensions of 4K content.
		"""
		if is_4k:
			return self.render(reel, DOWNSCALE_FILTER)
		return self.render(reel)

	#============================
	def _render_stereoscopic(self, reel: Reel, out_file: str, extra_filter: str):
		left_file = utils.replace_extension(reel.video_file, LEFT_SUFFIX)
		right_file = utils.replace_extension(reel.video_file, RIGHT_SUFFIX)
		if not self._extract_eye(reel, left_file, left=True):
			return None
		if not self._extract_eye(reel, right_file, left=False):
			return None
		graph = '[0:v][1:v]hstack=inputs=2'
		if extra_filter:
			graph += f",{extra_filter}"
		graph += '[v]'
		cmd = EngineCommand()
		cmd.add_input(left_file)
		cmd.add_input(right_file)
		cmd.filter_complex(graph, 'v')
		cmd.video_codec(self.settings.video_codec)
		if self.settings.chroma_subsampling:
			cmd.pixel_format(SUBSAMPLED_PIXEL_FORMAT)
		cmd.quality(self.settings.crf_3d)
		cmd.output(out_file)
		if not self.engine.run(cmd):
			return None
		utils.remove_files([left_file, right_file])
		return out_file

	#============================
	def _extract_eye(self, reel: Reel, eye_file: str, left: bool) -> bool:
		if self._reusable(eye_file):
			return True
		start = utils.seconds_text(reel.video_entry_point, reel.frame_rate)
		# the interleaved stream holds both eyes; read twice the reel length
		# on the input side, before setpts halves the timestamps
		length = utils.seconds_text(reel.duration * 2, reel.frame_rate)
		cmd = EngineCommand()
		cmd.add_input(reel.video_file, seek=start, frame_rate=reel.frame_rate,
			duration=length)
		cmd.video_filter(eye_filter(reel.frame_rate, left))
		cmd.video_codec(self.settings.video_codec)
		cmd.quality(self.settings.eye_crf)
		cmd.output(eye_file)
		return self.engine.run(cmd)

	#============================
	def _reusable(self, filepath: str) -> bool:
		return self.settings.resume and os.path.exists(filepath)
