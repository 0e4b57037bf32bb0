#!/usr/bin/env python3

#============================================

class StructuralParseError(RuntimeError):
	"""ASSETMAP or CPL file is missing, malformed, or has a bad number."""
	pass

#============================================

class UnresolvedAssetError(RuntimeError):
	"""A reel track references an id that is not in the ASSETMAP."""
	pass

#============================================

class EngineCommandError(ValueError):
	"""An engine argument is not in the known option set or is invalid."""
	pass
