#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Find FNSKU labels in a PDF, white out text and add a line of text.
"""

# local repo modules
import fnsku_label_editor.cli


if __name__ == "__main__":
	raise SystemExit(fnsku_label_editor.cli.main())
