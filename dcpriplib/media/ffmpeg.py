#!/usr/bin/env python3

from dcpriplib.media.engine import EngineCommand
from dcpriplib.media.engine import FfmpegEngine
from dcpriplib.media.ffmpeg_video import ReelVideoTranscoder
from dcpriplib.media.ffmpeg_audio import ReelAudioTranscoder
from dcpriplib.media.ffmpeg_merge import Merger

__all__ = [
	'EngineCommand',
	'FfmpegEngine',
	'ReelVideoTranscoder',
	'ReelAudioTranscoder',
	'Merger',
]
