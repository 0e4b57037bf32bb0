#!/usr/bin/env python3

"""
Pytest coverage for per-composition reel orchestration and naming.
"""

# Standard Library
import os
import sys
import threading

# PIP3 modules
import pytest

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
	sys.path.insert(0, REPO_ROOT)

# tests helpers
TESTS_DIR = os.path.abspath(os.path.dirname(__file__))
if TESTS_DIR not in sys.path:
	sys.path.insert(0, TESTS_DIR)
from dcp_utils import make_package
from fake_engine import FakeEngine

# local repo modules
from dcpriplib.core import utils
from dcpriplib.core.composition import CompositionOrchestrator
from dcpriplib.core.composition import output_file_name
from dcpriplib.core.settings import RipSettings

#============================================

@pytest.fixture(autouse=True)
def quiet_mode():
	utils.set_quiet_mode(True)
	yield
	utils.set_quiet_mode(False)

#============================================

def _three_reels() -> list:
	return [
		{'video_id': 'v1', 'audio_id': 'a1'},
		{'video_id': 'v2', 'audio_id': 'a2'},
		{'video_id': 'v3', 'audio_id': 'a3'},
	]

#============================================

def test_output_file_name() -> None:
	assert output_file_name("Movie", 1, 1) == "Movie.mkv"
	assert output_file_name("Movie", 1, 3) == "Movie_1.mkv"
	assert output_file_name("Movie", 3, 3) == "Movie_3.mkv"

#============================================

def test_single_reel_end_to_end(tmp_path) -> None:
	cpl_file = make_package(str(tmp_path), "Movie_FTR",
		[{'video_id': 'v1', 'audio_id': 'a1'}])
	engine = FakeEngine()
	orchestrator = CompositionOrchestrator.from_playlist(cpl_file, RipSettings(), engine)
	assert orchestrator.run() is True
	assert engine.output_names() == ["v1.mkv", "a1.mkv", "Movie_FTR.mkv"]
	video_args = engine.commands[0].to_args()
	assert video_args[video_args.index('-ss') + 1] == "0.000"
	assert video_args[video_args.index('-t') + 1] == "10.000"
	assert os.path.exists(str(tmp_path / "Movie_FTR.mkv"))
	assert not os.path.exists(str(tmp_path / "v1.mkv"))
	assert not os.path.exists(str(tmp_path / "a1.mkv"))
	assert orchestrator.output_files == [str(tmp_path / "Movie_FTR.mkv")]

#============================================

def test_failed_reel_keeps_later_indices(tmp_path) -> None:
	"""
	Reel 2 fails; reels 1 and 3 still merge under their own numbers.
	"""
	cpl_file = make_package(str(tmp_path), "Movie_FTR", _three_reels())
	engine = FakeEngine(fail_outputs=("v2.mkv",))
	orchestrator = CompositionOrchestrator.from_playlist(cpl_file, RipSettings(), engine)
	assert orchestrator.run() is False
	assert os.path.exists(str(tmp_path / "Movie_FTR_1.mkv"))
	assert not os.path.exists(str(tmp_path / "Movie_FTR_2.mkv"))
	assert os.path.exists(str(tmp_path / "Movie_FTR_3.mkv"))
	# the audio of the failed reel is left behind for inspection
	assert os.path.exists(str(tmp_path / "a2.mkv"))

#============================================

def test_downscale_renames_first_4k_only(tmp_path) -> None:
	reels = _three_reels()[:2]
	cpl_file = make_package(str(tmp_path), "Movie_4K_FTR_4K", reels)
	engine = FakeEngine()
	orchestrator = CompositionOrchestrator.from_playlist(cpl_file, RipSettings(), engine)
	assert orchestrator.run(downscale_if_4k=True) is True
	assert os.path.exists(str(tmp_path / "Movie_2K_FTR_4K_1.mkv"))
	assert os.path.exists(str(tmp_path / "Movie_2K_FTR_4K_2.mkv"))
	assert engine.commands[0].option_values('-vf') == ["scale=iw/2:ih/2"]
	assert orchestrator.composition.title == "Movie_4K_FTR_4K"

#============================================

def test_single_reel_downscale_renames(tmp_path) -> None:
	cpl_file = make_package(str(tmp_path), "Movie_4K",
		[{'video_id': 'v1', 'audio_id': 'a1'}])
	orchestrator = CompositionOrchestrator.from_playlist(cpl_file, RipSettings(),
		FakeEngine())
	assert orchestrator.run(downscale_if_4k=True) is True
	assert os.path.exists(str(tmp_path / "Movie_2K.mkv"))

#============================================

def test_output_path_override(tmp_path) -> None:
	source_dir = tmp_path / "dcp"
	out_dir = tmp_path / "out"
	out_dir.mkdir()
	cpl_file = make_package(str(source_dir), "Movie_FTR", _three_reels()[:2])
	orchestrator = CompositionOrchestrator.from_playlist(cpl_file, RipSettings(),
		FakeEngine())
	assert orchestrator.run(output_path=str(out_dir)) is True
	assert sorted(os.listdir(str(out_dir))) == ["Movie_FTR_1.mkv", "Movie_FTR_2.mkv"]

#============================================

def test_unresolved_reel_fails_without_engine(tmp_path) -> None:
	reels = _three_reels()
	reels[0]['unmapped'] = ('v1',)
	cpl_file = make_package(str(tmp_path), "Movie_FTR", reels)
	engine = FakeEngine()
	orchestrator = CompositionOrchestrator.from_playlist(cpl_file, RipSettings(), engine)
	assert orchestrator.run() is False
	assert "v1.mkv" not in engine.output_names()
	assert "a1.mkv" not in engine.output_names()
	assert os.path.exists(str(tmp_path / "Movie_FTR_2.mkv"))
	assert os.path.exists(str(tmp_path / "Movie_FTR_3.mkv"))

#============================================

def test_cancelled_run_stops_between_reels(tmp_path) -> None:
	cpl_file = make_package(str(tmp_path), "Movie_FTR", _three_reels())
	cancel_event = threading.Event()
	cancel_event.set()
	engine = FakeEngine()
	orchestrator = CompositionOrchestrator.from_playlist(cpl_file, RipSettings(),
		engine, cancel_event=cancel_event)
	assert orchestrator.run() is False
	assert engine.commands == []
