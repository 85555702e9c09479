"""
Pytest configuration for local imports.
"""

# Standard Library
import os
import sys

#============================================


def _ensure_on_path(path: str) -> None:
	"""
	Put a directory at the front of sys.path once.

	Args:
		path: Directory to import from.
	"""
	if path not in sys.path:
		sys.path.insert(0, path)


TESTS_DIR = os.path.abspath(os.path.dirname(__file__))
_ensure_on_path(os.path.dirname(TESTS_DIR))
_ensure_on_path(TESTS_DIR)
