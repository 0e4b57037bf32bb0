#!/usr/bin/env python3

import os
import typing

#============================================

class Reel(typing.NamedTuple):
	"""One reel with both essence files resolved."""
	video_file: str
	audio_file: str
	video_entry_point: int = 0
	audio_entry_point: int = 0
	duration: int = 0
	frame_rate: int = 0
	stereoscopic: bool = False

#============================================

class UnresolvedReel(typing.NamedTuple):
	"""
	One reel where at least one track id was missing from the ASSETMAP.

	missing_tracks holds 'video' and/or 'audio'.
	"""
	video_file: typing.Optional[str]
	audio_file: typing.Optional[str]
	video_entry_point: int = 0
	audio_entry_point: int = 0
	duration: int = 0
	frame_rate: int = 0
	stereoscopic: bool = False
	missing_tracks: tuple = ()

#============================================

class Composition(typing.NamedTuple):
	title: str
	is_4k: bool
	reels: tuple

	#============================
	def renamed_2k(self) -> 'Composition':
		"""
		Copy with the first _4K in the title changed to _2K.
		"""
		return self._replace(title=self.title.replace('_4K', '_2K', 1))

	#============================
	def to_plan(self) -> dict:
		reels = []
		for reel in self.reels:
			entry = dict(reel._asdict())
			entry['missing_tracks'] = list(entry.get('missing_tracks', ()))
			entry['resolved'] = isinstance(reel, Reel)
			reels.append(entry)
		return {
			'title': self.title,
			'is_4k': self.is_4k,
			'reels': reels,
		}

#============================================

class CompositionInfo():
	"""A queued playlist file and the title shown for it."""
	def __init__(self, path: str, title: str = None):
		self.path = path
		if title is None:
			title = os.path.splitext(os.path.basename(path))[0]
		self.title = title

	#============================
	def __str__(self) -> str:
		return self.title

	#============================
	def __repr__(self) -> str:
		return f"CompositionInfo({self.path!r}, {self.title!r})"
