"""
Shared configuration and constants.
"""

# Standard Library
import dataclasses


ANCHOR_REGEX = r"^(X00|B0)[A-Z0-9]{8,10}$"

SEARCH_WINDOW_X = 120.0
SEARCH_WINDOW_Y = 60.0

GLYPH_WIDTH_FACTOR = 0.55
REMOVAL_MARGIN = 2.0
INSERT_MARGIN = 2.0

DEFAULT_FONT = "Helvetica"
DEFAULT_FONT_SIZE = 8.0
DEFAULT_INSERT_TEXT = "Made in China"
REMOVE_FILL_COLOR = (1.0, 1.0, 1.0)
TEXT_FILL_COLOR = (0.0, 0.0, 0.0)

OUTPUT_PREFIX = "processed_"
PROGRESS_BAR_WIDTH = 20


@dataclasses.dataclass
class EditConfig:
	text_to_remove: str = ""
	add_text: bool = False
	insert_text: str = DEFAULT_INSERT_TEXT
	font_size: float = DEFAULT_FONT_SIZE
	window_x: float = SEARCH_WINDOW_X
	window_y: float = SEARCH_WINDOW_Y


@dataclasses.dataclass
class EditResult:
	pdf_bytes: bytes
	pages: int
	labels: int
	removed_areas: int
	added_texts: int


#============================================
def parse_font_size(value: str | None) -> float:
	"""
	Parse a font size, falling back to the default.

	Args:
		value: Font size string, possibly empty.

	Returns:
		Positive font size.
	"""
	if value is None:
		return DEFAULT_FONT_SIZE
	value = value.strip()
	if not value:
		return DEFAULT_FONT_SIZE
	try:
		size = float(int(float(value)))
	except (ValueError, OverflowError):
		return DEFAULT_FONT_SIZE
	if size <= 0:
		return DEFAULT_FONT_SIZE
	return size
