#!/usr/bin/env python3

import os
import lxml.etree
from dcpriplib.core.errors import StructuralParseError

#============================================

ASSETMAP_NAMES = ('ASSETMAP', 'ASSETMAP.xml')

#============================================

def local_name(element) -> str:
	if not isinstance(element.tag, str):
		return ''
	return lxml.etree.QName(element).localname

#============================================

def find_assetmap(directory: str) -> str:
	for name in ASSETMAP_NAMES:
		candidate = os.path.join(directory, name)
		if os.path.isfile(candidate):
			return candidate
	raise StructuralParseError(f"no ASSETMAP found in {directory}")

#============================================

def parse_assetmap(directory: str) -> dict:
	"""
	Map asset ids to paths relative to the package folder.

	Each Path element is paired with the Id element read just before it,
	in document order.
	"""
	assetmap_file = find_assetmap(directory)
	assets = {}
	next_id = ''
	try:
		for event, element in lxml.etree.iterparse(assetmap_file, events=('end',)):
			name = local_name(element)
			if name == 'Id':
				next_id = (element.text or '').strip()
			elif name == 'Path':
				assets[next_id] = (element.text or '').strip()
	except (lxml.etree.XMLSyntaxError, OSError) as exc:
		raise StructuralParseError(f"cannot read {assetmap_file}: {exc}") from exc
	return assets
