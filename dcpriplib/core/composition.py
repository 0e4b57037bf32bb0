#!/usr/bin/env python3

import os
from tqdm import tqdm
from dcpriplib.core import utils
from dcpriplib.core.models import Composition
from dcpriplib.core.models import Reel
from dcpriplib.dcp.cpl import parse_composition
from dcpriplib.media.ffmpeg import Merger
from dcpriplib.media.ffmpeg import ReelAudioTranscoder
from dcpriplib.media.ffmpeg import ReelVideoTranscoder

#============================================

OUTPUT_EXTENSION = '.mkv'

#============================================

def output_file_name(title: str, reel_index: int, reel_count: int) -> str:
	if reel_count == 1:
		return f"{title}{OUTPUT_EXTENSION}"
	return f"{title}_{reel_index}{OUTPUT_EXTENSION}"

#============================================

class CompositionOrchestrator():
	def __init__(self, composition: Composition, settings, engine,
		cancel_event=None):
		self.composition = composition
		self.settings = settings
		self.engine = engine
		self.cancel_event = cancel_event
		self.video = ReelVideoTranscoder(engine, settings)
		self.audio = ReelAudioTranscoder(engine, settings)
		self.merger = Merger(engine)
		self.output_files = []

	#============================
	@classmethod
	def from_playlist(cls, cpl_file: str, settings, engine, cancel_event=None):
		return cls(parse_composition(cpl_file), settings, engine,
			cancel_event=cancel_event)

	#============================
	def run(self, downscale_if_4k: bool = False, output_path: str = None) -> bool:
		"""
		Render, mux, and clean up every reel in order.

		A failed reel does not stop later reels, and reel numbers in output
		names always follow playlist position. Returns True only when every
		reel produced an output file; some outputs may exist either way.
		"""
		title = self.composition.title
		if downscale_if_4k:
			title = self.composition.renamed_2k().title
		reels = self.composition.reels
		reel_count = len(reels)
		reels_done = 0
		self.output_files = []
		iter_reels = enumerate(reels, start=1)
		if not utils.is_quiet_mode():
			iter_reels = tqdm(iter_reels, total=reel_count, desc=title, unit='reel')
		for index, reel in iter_reels:
			if self._cancelled():
				break
			if not isinstance(reel, Reel):
				self._note(f"reel {index} of {title} is missing its "
					f"{' and '.join(reel.missing_tracks)} asset")
				continue
			if downscale_if_4k:
				video_file = self.video.render_2k(reel, self.composition.is_4k)
			else:
				video_file = self.video.render(reel)
			audio_file = self.audio.render(reel)
			if video_file is None or audio_file is None:
				self._note(f"reel {index} of {title} failed to encode")
				continue
			out_dir = output_path
			if out_dir is None:
				out_dir = os.path.dirname(reel.video_file)
			out_file = os.path.join(out_dir,
				output_file_name(title, index, reel_count))
			if self.merger.merge(video_file, audio_file, out_file):
				reels_done += 1
				self.output_files.append(out_file)
			else:
				self._note(f"reel {index} of {title} failed to merge")
		return reels_done == reel_count

	#============================
	def _cancelled(self) -> bool:
		return self.cancel_event is not None and self.cancel_event.is_set()

	#============================
	def _note(self, text: str) -> None:
		if not utils.is_quiet_mode():
			print(text)
