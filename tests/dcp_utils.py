"""
Helpers that write small ASSETMAP and CPL files for tests.
"""

# Standard Library
import os

#============================================

CPL_NS = "http://www.smpte-ra.org/schemas/429-7/2006/CPL"
STEREO_NS = "http://www.smpte-ra.org/schemas/429-10/2008/Main-Stereo-Picture-CPL"
AM_NS = "http://www.smpte-ra.org/schemas/429-9/2007/AM"

#============================================

def write_text_file(path: str, text: str) -> None:
	"""
	Write text to a file.
	"""
	with open(path, 'w', encoding='utf-8') as handle:
		handle.write(text)
	return

#============================================

def write_assetmap(directory: str, assets: dict, name: str = "ASSETMAP") -> str:
	"""
	Write an ASSETMAP pairing each id with its path.
	"""
	lines = []
	lines.append('<?xml version="1.0" encoding="UTF-8"?>')
	lines.append(f'<AssetMap xmlns="{AM_NS}">')
	lines.append('  <Id>urn:uuid:assetmap</Id>')
	lines.append('  <AssetList>')
	for asset_id, path in assets.items():
		lines.append('    <Asset>')
		lines.append(f'      <Id>{asset_id}</Id>')
		lines.append('      <ChunkList><Chunk>')
		lines.append(f'        <Path>{path}</Path>')
		lines.append('      </Chunk></ChunkList>')
		lines.append('    </Asset>')
	lines.append('  </AssetList>')
	lines.append('</AssetMap>')
	filepath = os.path.join(directory, name)
	write_text_file(filepath, "\n".join(lines) + "\n")
	return filepath

#============================================

def _picture_lines(reel: dict) -> list:
	if reel.get('stereo'):
		open_tag = f'<msp-cpl:MainStereoscopicPicture xmlns:msp-cpl="{STEREO_NS}">'
		close_tag = '</msp-cpl:MainStereoscopicPicture>'
	else:
		open_tag = '<MainPicture>'
		close_tag = '</MainPicture>'
	duration = reel.get('duration', 240)
	lines = []
	lines.append(f'        {open_tag}')
	lines.append(f'          <Id>{reel["video_id"]}</Id>')
	lines.append('          <EditRate>24 1</EditRate>')
	lines.append(f'          <IntrinsicDuration>{duration + 1000}</IntrinsicDuration>')
	lines.append(f'          <EntryPoint>{reel.get("video_entry", 0)}</EntryPoint>')
	lines.append(f'          <Duration>{duration}</Duration>')
	lines.append(f'          <FrameRate>{reel.get("frame_rate", "24 1")}</FrameRate>')
	lines.append(f'        {close_tag}')
	return lines

#============================================

def write_cpl(directory: str, title: str, reels: list,
	name: str = "CPL_test.xml") -> str:
	"""
	Write a CPL with one MainPicture (or stereoscopic picture) and one
	MainSound per reel, plus an optional MainSubtitle.
	"""
	lines = []
	lines.append('<?xml version="1.0" encoding="UTF-8"?>')
	lines.append(f'<CompositionPlaylist xmlns="{CPL_NS}">')
	lines.append('  <Id>urn:uuid:cpl</Id>')
	lines.append(f'  <ContentTitleText>{title}</ContentTitleText>')
	lines.append('  <ReelList>')
	for index, reel in enumerate(reels, start=1):
		duration = reel.get('duration', 240)
		lines.append('    <Reel>')
		lines.append(f'      <Id>urn:uuid:reel-{index}</Id>')
		lines.append('      <AssetList>')
		lines.extend(_picture_lines(reel))
		lines.append('        <MainSound>')
		lines.append(f'          <Id>{reel["audio_id"]}</Id>')
		lines.append('          <EditRate>24 1</EditRate>')
		lines.append(f'          <EntryPoint>{reel.get("audio_entry", 0)}</EntryPoint>')
		lines.append(f'          <Duration>{duration}</Duration>')
		lines.append('        </MainSound>')
		if reel.get('subtitle_id') is not None:
			lines.append('        <MainSubtitle>')
			lines.append(f'          <Id>{reel["subtitle_id"]}</Id>')
			lines.append('          <EntryPoint>99</EntryPoint>')
			lines.append('          <Duration>5</Duration>')
			lines.append('        </MainSubtitle>')
		lines.append('      </AssetList>')
		lines.append('    </Reel>')
	lines.append('  </ReelList>')
	lines.append('</CompositionPlaylist>')
	filepath = os.path.join(directory, name)
	write_text_file(filepath, "\n".join(lines) + "\n")
	return filepath

#============================================

def make_package(directory: str, title: str, reels: list) -> str:
	"""
	Write ASSETMAP, CPL and empty essence files for the given reels.

	Each reel names video_id/audio_id; essence files are called
	<id>.mxf. Ids listed in a reel's 'unmapped' list are left out of the
	ASSETMAP. Returns the CPL path.
	"""
	os.makedirs(directory, exist_ok=True)
	assets = {}
	for reel in reels:
		unmapped = reel.get('unmapped', ())
		for key in ('video_id', 'audio_id', 'subtitle_id'):
			asset_id = reel.get(key)
			if asset_id is None or asset_id in unmapped:
				continue
			filename = f"{asset_id}.mxf"
			assets[asset_id] = filename
			write_text_file(os.path.join(directory, filename), "")
	write_assetmap(directory, assets)
	return write_cpl(directory, title, reels)
