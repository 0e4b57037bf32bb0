#!/usr/bin/env python3

import os
import yaml

#============================================

PARENT_MARKER = 'parent'

#============================================

class RipSettings():
	def __init__(self):
		self.ffmpeg = 'ffmpeg'
		self.video_codec = 'libx265'
		self.crf = 23
		self.crf_3d = 18
		self._chroma_subsampling = False
		self.audio_codec = 'libopus'
		self.output_path = None
		self.downscale_4k = False
		self.resume = False

	#============================
	@property
	def chroma_subsampling(self) -> bool:
		# libx264 output is always normalized to 4:2:0
		if self.video_codec == 'libx264':
			return True
		return self._chroma_subsampling

	#============================
	@chroma_subsampling.setter
	def chroma_subsampling(self, value: bool) -> None:
		self._chroma_subsampling = bool(value)

	#============================
	@property
	def eye_crf(self) -> int:
		return max(self.crf_3d - 5, 0)

	#============================
	def to_dict(self) -> dict:
		return {
			'ffmpeg': self.ffmpeg,
			'video': {
				'codec': self.video_codec,
				'crf': self.crf,
				'crf_3d': self.crf_3d,
				'chroma_subsampling': self.chroma_subsampling,
			},
			'audio': {
				'codec': self.audio_codec,
			},
			'output': {
				'path': self.output_path,
				'downscale_4k': self.downscale_4k,
				'resume': self.resume,
			},
		}

#============================================

def _parse_crf(section: dict, key: str, default: int) -> int:
	value = section.get(key, default)
	if isinstance(value, bool) or not isinstance(value, int):
		raise RuntimeError(f"video.{key} must be an integer")
	if value < 0 or value > 63:
		raise RuntimeError(f"video.{key} must be between 0 and 63")
	return value

#============================================

def _get_section(data: dict, key: str) -> dict:
	section = data.get(key)
	if section is None:
		return {}
	if not isinstance(section, dict):
		raise RuntimeError(f"{key} must be a mapping")
	return section

#============================================

def settings_from_dict(data: dict) -> RipSettings:
	settings = RipSettings()
	if data is None:
		return settings
	if not isinstance(data, dict):
		raise RuntimeError("settings yaml must be a mapping at the top level")
	settings.ffmpeg = str(data.get('ffmpeg', settings.ffmpeg))
	video = _get_section(data, 'video')
	settings.video_codec = str(video.get('codec', settings.video_codec))
	settings.crf = _parse_crf(video, 'crf', settings.crf)
	settings.crf_3d = _parse_crf(video, 'crf_3d', settings.crf_3d)
	settings.chroma_subsampling = video.get('chroma_subsampling', False)
	audio = _get_section(data, 'audio')
	settings.audio_codec = str(audio.get('codec', settings.audio_codec))
	output = _get_section(data, 'output')
	output_path = output.get('path')
	if output_path is not None:
		output_path = str(output_path)
	settings.output_path = output_path
	settings.downscale_4k = bool(output.get('downscale_4k', False))
	settings.resume = bool(output.get('resume', False))
	return settings

#============================================

def load_settings(yaml_file: str = None) -> RipSettings:
	if yaml_file is None:
		return RipSettings()
	if not os.path.isfile(yaml_file):
		raise RuntimeError(f"settings file not found: {yaml_file}")
	with open(yaml_file, 'r') as data_file:
		data = yaml.safe_load(data_file)
	return settings_from_dict(data)
