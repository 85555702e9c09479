"""
Positioned text extraction from raw PDF page content streams.

The scan is pattern based and only models the instruction shapes that label
printers emit: a text object (BT ... ET) holding a text matrix (Tm) followed by
a literal-string show operator (Tj, TJ). Shows after a line move (Td, TD, T*,
', ") or after another show are dropped. Anything else inside a text object
is ignored, and text objects that do not fit this shape produce no tokens.
"""

# Standard Library
import dataclasses
import re

# PIP3 modules
import pypdf

# local repo modules
import fnsku_label_editor as fle
import fnsku_label_editor.config


GLYPH_WIDTH_FACTOR = fle.config.GLYPH_WIDTH_FACTOR

NUMBER = r"[-+]?(?:\d+\.?\d*|\.\d+)"
LITERAL_BODY = r"(?:\\.|[^\\)])*"
LITERAL = r"\(" + LITERAL_BODY + r"\)"
HEX_STRING = r"<[0-9A-Fa-f\s]*>"
ARRAY_BODY = r"(?:\s*(?:" + LITERAL + r"|" + HEX_STRING + r"|" + NUMBER + r"(?![\d.])))*\s*"

TEXT_BLOCK_RE = re.compile(r"\bBT\b(.*?)\bET\b", re.DOTALL)
OPERATOR_RE = re.compile(
	r"(?P<tm>(?<!\S)" + r"\s+".join([NUMBER] * 6) + r"\s+Tm\b)"
	+ r"|\((?P<string>" + LITERAL_BODY + r")\)\s*Tj\b"
	+ r"|\[(?P<items>" + ARRAY_BODY + r")\]\s*TJ\b"
	+ r"|(?P<move>(?<!\S)(?:" + NUMBER + r"\s+" + NUMBER + r"\s+T[dD]\b|T\*|" + LITERAL + r"\s*['\"]))",
	re.DOTALL,
)
ARRAY_LITERAL_RE = re.compile(r"\((" + LITERAL_BODY + r")\)", re.DOTALL)
ESCAPE_RE = re.compile(r"\\([0-7]{1,3}|\r\n|.)", re.DOTALL)

ESCAPES = {
	"n": "\n",
	"r": "\r",
	"t": "\t",
	"b": "\b",
	"f": "\f",
	"(": "(",
	")": ")",
	"\\": "\\",
	"\n": "",
	"\r": "",
	"\r\n": "",
}


@dataclasses.dataclass(frozen=True)
class Token:
	text: str
	x: float
	y: float
	width: float
	height: float


#============================================
def decode_content(content: str | bytes) -> str:
	"""
	Decode a content stream into text, one character per byte.

	Args:
		content: Raw content stream.

	Returns:
		Content stream as a str.
	"""
	if isinstance(content, (bytes, bytearray)):
		return bytes(content).decode("latin-1")
	return content


#============================================
def decode_literal(raw: str) -> str:
	"""
	Decode the escapes of a PDF literal string body.

	Args:
		raw: String body without the enclosing parentheses.

	Returns:
		Decoded text.
	"""
	def replace(match: re.Match) -> str:
		value = match.group(1)
		if value[0] in "01234567":
			return chr(int(value, 8) & 0xFF)
		return ESCAPES.get(value, value)

	return ESCAPE_RE.sub(replace, raw)


#============================================
def matrix_font_size(matrix: tuple[float, ...]) -> float:
	"""
	Infer a font size from a text matrix.

	Uses the horizontal scale when it is set and the vertical scale otherwise.
	Rotated or skewed matrices give a wrong size; that is accepted.

	Args:
		matrix: Six text matrix operands (a b c d e f).

	Returns:
		Non-negative font size.
	"""
	scale = matrix[0] if matrix[0] != 0 else matrix[3]
	return abs(scale)


#============================================
def build_token(text: str, matrix: tuple[float, ...]) -> Token | None:
	"""
	Build a positioned token from shown text and its text matrix.

	Args:
		text: Decoded text.
		matrix: Text matrix in effect for the show operator.

	Returns:
		Token, or None when the matrix carries no usable size.
	"""
	font_size = matrix_font_size(matrix)
	if font_size == 0:
		return None
	return Token(
		text=text,
		x=matrix[4],
		y=matrix[5],
		width=len(text) * font_size * GLYPH_WIDTH_FACTOR,
		height=font_size,
	)


#============================================
def iter_text_blocks(content: str | bytes) -> list[str]:
	"""
	Find the bodies of all BT ... ET text objects.

	Args:
		content: Raw content stream.

	Returns:
		Text object bodies in stream order.
	"""
	return TEXT_BLOCK_RE.findall(decode_content(content))


#============================================
def extract_block_tokens(block: str) -> list[Token]:
	"""
	Extract tokens from one text object body.

	Only the first show operator after a Tm becomes a token, positioned at
	the matrix origin. A later show, or one after a line move, starts
	somewhere the matrix alone does not tell, so it is dropped.

	Args:
		block: Text object body.

	Returns:
		Tokens in stream order.
	"""
	tokens: list[Token] = []
	matrix = None
	for match in OPERATOR_RE.finditer(block):
		if match.group("tm") is not None:
			operands = match.group("tm").split()[:6]
			matrix = tuple(float(value) for value in operands)
			continue
		if match.group("move") is not None:
			matrix = None
			continue
		if match.group("string") is not None:
			text = decode_literal(match.group("string"))
		else:
			parts = ARRAY_LITERAL_RE.findall(match.group("items"))
			text = "".join(decode_literal(part) for part in parts)
		shown_matrix = matrix
		matrix = None
		if shown_matrix is None or not text:
			continue
		token = build_token(text, shown_matrix)
		if token is not None:
			tokens.append(token)
	return tokens


#============================================
def extract_tokens(content: str | bytes) -> list[Token]:
	"""
	Extract positioned text tokens from a page content stream.

	Coordinates are in content stream space with a bottom-left origin. Width
	and height are estimates from the matrix font size, not glyph metrics.

	Args:
		content: Raw content stream.

	Returns:
		Tokens in stream order.
	"""
	tokens: list[Token] = []
	for block in iter_text_blocks(content):
		tokens.extend(extract_block_tokens(block))
	return tokens


#============================================
def read_page_content(page: pypdf.PageObject) -> str:
	"""
	Read the decoded content stream of a page.

	Args:
		page: pypdf page.

	Returns:
		Content stream text, empty when the page has no contents.
	"""
	contents = page.get_contents()
	if contents is None:
		return ""
	return decode_content(contents.get_data())
