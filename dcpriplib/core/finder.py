#!/usr/bin/env python3

import os
from dcpriplib.core.models import CompositionInfo
from dcpriplib.dcp.cpl import read_playlist_title

#============================================

def composition_info(cpl_file: str) -> CompositionInfo:
	title = None
	if os.path.isfile(cpl_file):
		title = read_playlist_title(cpl_file)
	if title == '':
		title = None
	return CompositionInfo(cpl_file, title)

#============================================

def find_compositions(folder: str) -> list:
	"""
	Every CompositionPlaylist XML file below a folder, in path order.
	"""
	found = []
	for root, dirs, files in os.walk(folder):
		dirs[:] = sorted(dirs)
		for name in sorted(files):
			if not name.lower().endswith('.xml'):
				continue
			filepath = os.path.join(root, name)
			title = read_playlist_title(filepath)
			if title is None:
				continue
			found.append(CompositionInfo(filepath, title or None))
	return found
