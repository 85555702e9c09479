"""
Label detection: anchor matching and window clustering.
"""

# Standard Library
import dataclasses
import re

# local repo modules
import fnsku_label_editor as fle
import fnsku_label_editor.config
import fnsku_label_editor.content_stream


Token = fle.content_stream.Token

ANCHOR_PATTERN = re.compile(fle.config.ANCHOR_REGEX)
SEARCH_WINDOW_X = fle.config.SEARCH_WINDOW_X
SEARCH_WINDOW_Y = fle.config.SEARCH_WINDOW_Y


@dataclasses.dataclass(frozen=True)
class Rect:
	x: float
	y: float
	width: float
	height: float

	def to_dict(self) -> dict:
		return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclasses.dataclass(frozen=True)
class Label:
	anchor: Token
	box: Rect
	items: tuple[Token, ...]
	page_height: float


#============================================
def is_anchor(text: str) -> bool:
	"""
	Check whether text is a product identifier (FNSKU or ASIN).

	Args:
		text: Token text.

	Returns:
		True when the trimmed text fully matches the identifier pattern.
	"""
	return ANCHOR_PATTERN.fullmatch(text.strip()) is not None


#============================================
def to_top_left(token: Token, page_height: float) -> Token:
	"""
	Re-express a token in top-left origin page space.

	Args:
		token: Token in content stream space.
		page_height: Page height in points.

	Returns:
		New token with a flipped y.
	"""
	return dataclasses.replace(token, y=page_height - token.y - token.height)


#============================================
def union_bounds(tokens: list[Token] | tuple[Token, ...]) -> tuple[float, float, float, float] | None:
	"""
	Compute the union bounds of token boxes.

	Args:
		tokens: Tokens in a common coordinate space.

	Returns:
		Bounds (min_x, min_y, max_x, max_y) or None when there are no tokens.
	"""
	bounds: tuple[float, float, float, float] | None = None
	for token in tokens:
		box = (token.x, token.y, token.x + token.width, token.y + token.height)
		if bounds is None:
			bounds = box
			continue
		bounds = (
			min(bounds[0], box[0]),
			min(bounds[1], box[1]),
			max(bounds[2], box[2]),
			max(bounds[3], box[3]),
		)
	return bounds


#============================================
def in_search_window(
	anchor: Token,
	token: Token,
	window_x: float,
	window_y: float,
) -> bool:
	"""
	Test a token against the open search window around an anchor.

	Args:
		anchor: Anchor token, top-left space.
		token: Candidate token, top-left space.
		window_x: Horizontal half width.
		window_y: Vertical half height.

	Returns:
		True when the token x and vertical center are strictly inside.
	"""
	center_y = token.y + token.height / 2.0
	if not anchor.x - window_x < token.x < anchor.x + window_x:
		return False
	return anchor.y - window_y < center_y < anchor.y + window_y


#============================================
def build_label(
	anchor: Token,
	tokens: list[Token],
	page_height: float,
	window_x: float = SEARCH_WINDOW_X,
	window_y: float = SEARCH_WINDOW_Y,
) -> Label:
	"""
	Gather the tokens around one anchor into a label.

	The anchor is always a member, even when a very tall anchor would put
	its own center outside the window.

	Args:
		anchor: Anchor token, top-left space.
		tokens: All page tokens including the anchor, top-left space.
		page_height: Page height in points.
		window_x: Horizontal half width.
		window_y: Vertical half height.

	Returns:
		Label with its box in bottom-left page space.
	"""
	items = tuple(
		token for token in tokens
		if token is anchor or in_search_window(anchor, token, window_x, window_y)
	)
	min_x, min_y, max_x, max_y = union_bounds(items)
	box = Rect(
		x=min_x,
		y=page_height - max_y,
		width=max_x - min_x,
		height=max_y - min_y,
	)
	return Label(anchor=anchor, box=box, items=items, page_height=page_height)


#============================================
def find_labels(
	tokens: list[Token],
	page_height: float,
	window_x: float = SEARCH_WINDOW_X,
	window_y: float = SEARCH_WINDOW_Y,
) -> list[Label]:
	"""
	Find one label per identifier token on a page.

	Labels from nearby anchors may overlap; they are not merged.

	Args:
		tokens: Page tokens in top-left space.
		page_height: Page height in points.
		window_x: Horizontal half width of the search window.
		window_y: Vertical half height of the search window.

	Returns:
		Labels in anchor stream order.
	"""
	anchors = [token for token in tokens if is_anchor(token.text)]
	return [
		build_label(anchor, tokens, page_height, window_x, window_y)
		for anchor in anchors
	]


#============================================
def labels_for_page(
	raw_tokens: list[Token],
	page_height: float,
	window_x: float = SEARCH_WINDOW_X,
	window_y: float = SEARCH_WINDOW_Y,
) -> list[Label]:
	"""
	Convert extracted tokens to top-left space and cluster them.

	Args:
		raw_tokens: Tokens as extracted, bottom-left space.
		page_height: Page height in points.
		window_x: Horizontal half width of the search window.
		window_y: Vertical half height of the search window.

	Returns:
		Labels found on the page.
	"""
	tokens = [to_top_left(token, page_height) for token in raw_tokens]
	return find_labels(tokens, page_height, window_x, window_y)


#============================================
def labels_from_content(
	content: str | bytes,
	page_height: float,
	window_x: float = SEARCH_WINDOW_X,
	window_y: float = SEARCH_WINDOW_Y,
) -> list[Label]:
	"""
	Find the labels in a raw page content stream.

	Args:
		content: Raw content stream.
		page_height: Page height in points.
		window_x: Horizontal half width of the search window.
		window_y: Vertical half height of the search window.

	Returns:
		Labels found on the page.
	"""
	raw_tokens = fle.content_stream.extract_tokens(content)
	return labels_for_page(raw_tokens, page_height, window_x, window_y)
