#!/usr/bin/env python3

import os
import threading
from dcpriplib.core.composition import CompositionOrchestrator
from dcpriplib.core.errors import EngineCommandError
from dcpriplib.core.errors import StructuralParseError
from dcpriplib.core.errors import UnresolvedAssetError
from dcpriplib.core.models import CompositionInfo
from dcpriplib.core.settings import PARENT_MARKER
from dcpriplib.media.engine import FfmpegEngine

#============================================

class BatchOrchestrator():
	"""
	Converts a queue of compositions one after another.

	status_callback receives progress text and completion_callback is
	called once the queue is done. When started with process_all_async
	both are called from the worker thread. archiver(source_dir,
	archive_path, status_callback) and deleter(source_dir) are only
	called for compositions where every reel converted.
	"""
	def __init__(self, settings, engine=None, compositions: list = None,
		status_callback=None, completion_callback=None, archiver=None,
		deleter=None):
		self.settings = settings
		self.cancel_event = threading.Event()
		if engine is None:
			engine = FfmpegEngine(settings.ffmpeg, cancel_event=self.cancel_event)
		self.engine = engine
		self.compositions = list(compositions or [])
		self.status_callback = status_callback
		self.completion_callback = completion_callback
		self.archiver = archiver
		self.deleter = deleter
		self.failures = []
		self.output_files = []
		self._thread = None
		self._lock = threading.Lock()

	#============================
	@property
	def in_progress(self) -> bool:
		return self._thread is not None and self._thread.is_alive()

	#============================
	def cancel(self) -> None:
		self.cancel_event.set()

	#============================
	def failed_contents(self) -> str:
		if len(self.failures) == 0:
			return ''
		return '\n'.join(self.failures) + '\n'

	#============================
	def process_all(self, compositions: list = None) -> None:
		"""
		Convert every queued composition on the calling thread.

		A cancel left over from an earlier run is cleared first, unless a
		worker thread is still running.
		"""
		with self._lock:
			if not self.in_progress:
				self.cancel_event.clear()
		self._run(compositions)

	#============================
	def _run(self, compositions: list = None) -> None:
		if compositions is None:
			compositions = self.compositions
		self.failures = []
		self.output_files = []
		for info in compositions:
			if isinstance(info, str):
				info = CompositionInfo(info)
			if self.cancel_event.is_set():
				self.failures.append(f"{info} skipped - cancelled.")
				continue
			self._process_single(info)
		self._status("Finished!")
		if self.completion_callback is not None:
			self.completion_callback()

	#============================
	def process_all_async(self, compositions: list = None) -> threading.Thread:
		"""
		Run process_all on a worker thread and return the thread.

		While a run is in flight the same thread is returned and nothing
		new is started or queued.
		"""
		with self._lock:
			if self.in_progress:
				return self._thread
			self.cancel_event.clear()
			self._thread = threading.Thread(target=self._run,
				args=(compositions,), daemon=True)
			self._thread.start()
			return self._thread

	#============================
	def _process_single(self, info: CompositionInfo) -> None:
		if not os.path.isfile(info.path):
			self.failures.append(f"{os.path.basename(info.path)} does not exist.")
			return
		source_folder = os.path.dirname(os.path.abspath(info.path))
		final_output = self.settings.output_path
		if final_output == PARENT_MARKER:
			final_output = os.path.dirname(source_folder)
			if final_output == source_folder:
				self.failures.append(f"Can't output {info} above a root folder.")
				return
		self._status(f"Processing {info}...")
		try:
			orchestrator = CompositionOrchestrator.from_playlist(info.path,
				self.settings, self.engine, cancel_event=self.cancel_event)
		except StructuralParseError as exc:
			self.failures.append(f"Loading {info} failed - {exc}.")
			return
		try:
			succeeded = orchestrator.run(downscale_if_4k=self.settings.downscale_4k,
				output_path=final_output)
		except (EngineCommandError, UnresolvedAssetError, OSError) as exc:
			self.output_files.extend(orchestrator.output_files)
			self.failures.append(f"Conversion of {info} failed - {exc}.")
			return
		self.output_files.extend(orchestrator.output_files)
		if not succeeded:
			self.failures.append(
				f"Conversion of {info} failed - most likely a codec error.")
			return
		if self.archiver is not None:
			self._status(f"Zipping {info}...")
			archive_dir = final_output if final_output is not None else source_folder
			archive_path = os.path.join(archive_dir, f"{info.title}.zip")
			try:
				self.archiver(source_folder, archive_path, self._status)
			except (OSError, RuntimeError) as exc:
				self.failures.append(f"Archiving {info} failed - {exc}.")
				return
		if self.deleter is not None:
			try:
				self.deleter(source_folder)
			except (OSError, RuntimeError) as exc:
				self.failures.append(f"Deleting sources of {info} failed - {exc}.")

	#============================
	def _status(self, text: str) -> None:
		if self.status_callback is not None:
			self.status_callback(text)
