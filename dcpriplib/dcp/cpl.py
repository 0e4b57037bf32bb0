#!/usr/bin/env python3

import os
import lxml.etree
from dcpriplib.core.errors import StructuralParseError
from dcpriplib.core.models import Composition
from dcpriplib.core.models import Reel
from dcpriplib.core.models import UnresolvedReel
from dcpriplib.dcp.assetmap import local_name
from dcpriplib.dcp.assetmap import parse_assetmap

#============================================

def parse_int(name: str, text: str) -> int:
	try:
		return int((text or '').strip())
	except ValueError:
		raise StructuralParseError(f"{name} is not a number: {text!r}") from None

#============================================

def parse_count(name: str, text: str) -> int:
	value = parse_int(name, text)
	if value < 0:
		raise StructuralParseError(f"{name} must not be negative: {value}")
	return value

#============================================

def parse_frame_rate(text: str) -> int:
	"""
	Read the leading integer of a '<rate> <unit>' field.

	'24 1' gives 24, and '24000 1001' gives 24000.
	"""
	parts = (text or '').split()
	if len(parts) == 0:
		raise StructuralParseError("FrameRate is empty")
	return parse_int('FrameRate', parts[0])

#============================================

class CompositionParser():
	def __init__(self, cpl_file: str, assets: dict = None):
		self.cpl_file = cpl_file
		self.directory = os.path.dirname(os.path.abspath(cpl_file))
		if assets is None:
			assets = parse_assetmap(self.directory)
		self.assets = assets

	#============================
	def parse(self) -> Composition:
		if not os.path.isfile(self.cpl_file):
			raise StructuralParseError(f"playlist not found: {self.cpl_file}")
		try:
			return self._parse_events()
		except (lxml.etree.XMLSyntaxError, OSError) as exc:
			raise StructuralParseError(f"cannot read {self.cpl_file}: {exc}") from exc

	#============================
	def _parse_events(self) -> Composition:
		title = ''
		reels = []
		reel = self._new_reel()
		video = True
		skipping = None
		events = lxml.etree.iterparse(self.cpl_file, events=('start', 'end'))
		for event, element in events:
			if skipping is not None:
				if event == 'end' and element is skipping:
					skipping = None
				continue
			name = local_name(element)
			if event == 'start':
				if name.endswith('MainStereoscopicPicture'):
					video = True
					reel['stereoscopic'] = True
				elif name == 'Reel':
					reel = self._new_reel()
				elif name == 'MainPicture':
					video = True
				elif name == 'MainSound':
					video = False
				elif name == 'MainSubtitle':
					skipping = element
				continue
			if name == 'Reel':
				reels.append(self._finish_reel(reel, len(reels) + 1))
			elif name == 'Id':
				path = self.assets.get((element.text or '').strip())
				if path is not None:
					track = 'video_file' if video else 'audio_file'
					reel[track] = os.path.join(self.directory, path)
			elif name == 'EntryPoint':
				track = 'video_entry_point' if video else 'audio_entry_point'
				reel[track] = parse_count('EntryPoint', element.text)
			elif name == 'Duration':
				reel['duration'] = parse_count('Duration', element.text)
			elif name == 'FrameRate':
				reel['frame_rate'] = parse_frame_rate(element.text)
			elif name == 'ContentTitleText':
				title = (element.text or '').strip()
		return Composition(title=title, is_4k='_4K' in title, reels=tuple(reels))

	#============================
	def _new_reel(self) -> dict:
		return {
			'video_file': None,
			'audio_file': None,
			'video_entry_point': 0,
			'audio_entry_point': 0,
			'duration': 0,
			'frame_rate': 0,
			'stereoscopic': False,
		}

	#============================
	def _finish_reel(self, reel: dict, index: int):
		if reel['frame_rate'] <= 0:
			raise StructuralParseError(f"reel {index} has no usable FrameRate")
		missing = []
		if reel['video_file'] is None:
			missing.append('video')
		if reel['audio_file'] is None:
			missing.append('audio')
		if len(missing) > 0:
			return UnresolvedReel(missing_tracks=tuple(missing), **reel)
		return Reel(**reel)

#============================================

def parse_composition(cpl_file: str) -> Composition:
	return CompositionParser(cpl_file).parse()

#============================================

def read_playlist_title(cpl_file: str):
	"""
	ContentTitleText of a CPL, or None when the file is not a CPL.
	"""
	title = None
	try:
		events = lxml.etree.iterparse(cpl_file, events=('start', 'end'))
		for event, element in events:
			name = local_name(element)
			if event == 'start':
				if element.getparent() is None:
					if name != 'CompositionPlaylist':
						return None
					title = ''
				continue
			if name == 'ContentTitleText':
				return (element.text or '').strip()
	except (lxml.etree.XMLSyntaxError, OSError):
		return None
	return title
