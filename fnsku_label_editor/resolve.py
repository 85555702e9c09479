"""
Removal and insertion geometry inside a detected label.
"""

# Standard Library
import dataclasses
import re

# local repo modules
import fnsku_label_editor as fle
import fnsku_label_editor.config
import fnsku_label_editor.segment


Label = fle.segment.Label
Rect = fle.segment.Rect
union_bounds = fle.segment.union_bounds

GLYPH_WIDTH_FACTOR = fle.config.GLYPH_WIDTH_FACTOR
REMOVAL_MARGIN = fle.config.REMOVAL_MARGIN
INSERT_MARGIN = fle.config.INSERT_MARGIN

WHITESPACE_RE = re.compile(r"\s+")


@dataclasses.dataclass(frozen=True)
class TextPlacement:
	text: str
	x: float
	y: float
	font_size: float


#============================================
def normalize_text(value: str) -> str:
	"""
	Strip all whitespace and lower-case text for matching.

	Args:
		value: Input text.

	Returns:
		Normalized text.
	"""
	return WHITESPACE_RE.sub("", value).lower()


#============================================
def find_removal_areas(
	label: Label,
	search_text: str,
	margin: float = REMOVAL_MARGIN,
) -> list[Rect]:
	"""
	Compute the white-out area for a phrase inside a label.

	A label token matches when its normalized text is contained in the
	normalized phrase. The matched tokens are unioned, grown by the margin,
	and flipped into the label box frame.

	Args:
		label: Detected label.
		search_text: Phrase to remove.
		margin: Margin added on every side.

	Returns:
		Zero or one rectangle in the label frame.
	"""
	needle = normalize_text(search_text)
	if not needle:
		return []
	matched = []
	for token in label.items:
		token_text = normalize_text(token.text)
		if token_text and token_text in needle:
			matched.append(token)
	bounds = union_bounds(matched)
	if bounds is None:
		return []
	min_x, min_y, max_x, max_y = bounds
	area = Rect(
		x=min_x - margin,
		y=label.box.height + label.box.y - max_y - margin,
		width=max_x - min_x + 2.0 * margin,
		height=max_y - min_y + 2.0 * margin,
	)
	return [area]


#============================================
def area_to_page(area: Rect, label: Label) -> Rect:
	"""
	Move a label-frame removal area into page drawing space.

	The label frame is offset from the page by the label top, measured from
	the top of the page.

	Args:
		area: Area returned by find_removal_areas.
		label: Label the area belongs to.

	Returns:
		Rect in bottom-left page space.
	"""
	label_top = label.page_height - label.box.y - label.box.height
	return dataclasses.replace(area, y=area.y + label_top)


#============================================
def page_removal_areas(label: Label, search_text: str) -> list[Rect]:
	"""
	Compute the white-out areas for a phrase in page drawing space.

	Args:
		label: Detected label.
		search_text: Phrase to remove.

	Returns:
		Zero or one rectangle in bottom-left page space.
	"""
	return [area_to_page(area, label) for area in find_removal_areas(label, search_text)]


#============================================
def estimate_text_width(text: str, font_size: float) -> float:
	"""
	Estimate rendered text width from an average glyph width.

	Args:
		text: Text to measure.
		font_size: Font size in points.

	Returns:
		Approximate width in points.
	"""
	return len(text) * font_size * GLYPH_WIDTH_FACTOR


#============================================
def place_text(
	text: str,
	font_size: float,
	box: Rect,
	margin: float = INSERT_MARGIN,
) -> TextPlacement:
	"""
	Center text horizontally in a box, just above its bottom edge.

	Args:
		text: Text to insert.
		font_size: Font size in points.
		box: Target label box, bottom-left space.
		margin: Gap above the bottom edge.

	Returns:
		Placement with the left edge x and baseline y.
	"""
	center_x = box.x + box.width / 2.0
	return TextPlacement(
		text=text,
		x=center_x - estimate_text_width(text, font_size) / 2.0,
		y=box.y + margin,
		font_size=font_size,
	)
