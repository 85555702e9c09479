"""
Modification instruction sets: wire format, validation and planning.

Wire format, one object per document:

	{"pages": [{"removeAreas": [{"x", "y", "width", "height"}],
	            "addText": [{"text", "x", "y", "fontSize"}]}]}

Index i of "pages" belongs to page i. Entries may be null or empty, and the
list may stop before the last page. The "x" of an addText entry is the
horizontal center of the text.
"""

# Standard Library
import dataclasses
import json
import math

# local repo modules
import fnsku_label_editor as fle
import fnsku_label_editor.config
import fnsku_label_editor.resolve
import fnsku_label_editor.segment


EditConfig = fle.config.EditConfig
Label = fle.segment.Label
Rect = fle.segment.Rect
page_removal_areas = fle.resolve.page_removal_areas

INSERT_MARGIN = fle.config.INSERT_MARGIN


class ModificationError(ValueError):
	"""
	Raised when a modification payload is missing or malformed.
	"""


@dataclasses.dataclass(frozen=True)
class TextAddition:
	text: str
	x: float
	y: float
	font_size: float

	def to_dict(self) -> dict:
		return {"text": self.text, "x": self.x, "y": self.y, "fontSize": self.font_size}


@dataclasses.dataclass
class PageModification:
	remove_areas: list[Rect] = dataclasses.field(default_factory=list)
	add_text: list[TextAddition] = dataclasses.field(default_factory=list)

	def is_empty(self) -> bool:
		return not self.remove_areas and not self.add_text

	def to_dict(self) -> dict:
		return {
			"removeAreas": [area.to_dict() for area in self.remove_areas],
			"addText": [addition.to_dict() for addition in self.add_text],
		}


@dataclasses.dataclass
class ModificationSet:
	pages: list[PageModification] = dataclasses.field(default_factory=list)

	def page(self, index: int) -> PageModification | None:
		if index < len(self.pages):
			return self.pages[index]
		return None

	def to_dict(self) -> dict:
		return {"pages": [page.to_dict() for page in self.pages]}

	def to_json(self) -> str:
		return json.dumps(self.to_dict(), indent=2)


#============================================
def parse_number(entry: dict, key: str, where: str) -> float:
	"""
	Read a required finite number from an instruction entry.

	Args:
		entry: Decoded JSON object.
		key: Field name.
		where: Location used in error messages.

	Returns:
		Float value.
	"""
	if key not in entry:
		raise ModificationError(f"{where}: missing field '{key}'")
	value = entry[key]
	if isinstance(value, bool) or not isinstance(value, (int, float)):
		raise ModificationError(f"{where}: field '{key}' must be a number")
	if not math.isfinite(value):
		raise ModificationError(f"{where}: field '{key}' must be finite")
	return float(value)


#============================================
def parse_list(entry: dict, key: str, where: str) -> list:
	"""
	Read an optional list field from an instruction entry.

	Args:
		entry: Decoded JSON object.
		key: Field name.
		where: Location used in error messages.

	Returns:
		List value, empty when the field is missing or null.
	"""
	value = entry.get(key)
	if value is None:
		return []
	if not isinstance(value, list):
		raise ModificationError(f"{where}: field '{key}' must be a list")
	return value


#============================================
def parse_rect(entry: object, where: str) -> Rect:
	"""
	Parse one removeAreas entry.

	Args:
		entry: Decoded JSON value.
		where: Location used in error messages.

	Returns:
		Rect.
	"""
	if not isinstance(entry, dict):
		raise ModificationError(f"{where}: expected an object")
	rect = Rect(
		x=parse_number(entry, "x", where),
		y=parse_number(entry, "y", where),
		width=parse_number(entry, "width", where),
		height=parse_number(entry, "height", where),
	)
	if rect.width < 0 or rect.height < 0:
		raise ModificationError(f"{where}: width and height must not be negative")
	return rect


#============================================
def parse_text_addition(entry: object, where: str) -> TextAddition:
	"""
	Parse one addText entry.

	Args:
		entry: Decoded JSON value.
		where: Location used in error messages.

	Returns:
		TextAddition.
	"""
	if not isinstance(entry, dict):
		raise ModificationError(f"{where}: expected an object")
	text = entry.get("text")
	if not isinstance(text, str):
		raise ModificationError(f"{where}: field 'text' must be a string")
	font_size = parse_number(entry, "fontSize", where)
	if font_size <= 0:
		raise ModificationError(f"{where}: field 'fontSize' must be positive")
	return TextAddition(
		text=text,
		x=parse_number(entry, "x", where),
		y=parse_number(entry, "y", where),
		font_size=font_size,
	)


#============================================
def parse_page(entry: object, index: int) -> PageModification:
	"""
	Parse the instructions for one page.

	Args:
		entry: Decoded JSON value, None for an untouched page.
		index: Page index.

	Returns:
		PageModification.
	"""
	where = f"pages[{index}]"
	if entry is None:
		return PageModification()
	if not isinstance(entry, dict):
		raise ModificationError(f"{where}: expected an object")
	remove_areas = [
		parse_rect(item, f"{where}.removeAreas[{item_index}]")
		for item_index, item in enumerate(parse_list(entry, "removeAreas", where))
	]
	add_text = [
		parse_text_addition(item, f"{where}.addText[{item_index}]")
		for item_index, item in enumerate(parse_list(entry, "addText", where))
	]
	return PageModification(remove_areas=remove_areas, add_text=add_text)


#============================================
def parse_modifications(payload: str | bytes | dict | None) -> ModificationSet:
	"""
	Parse and validate a modification instruction payload.

	The whole payload is validated before it is returned, so a document is
	never touched by a partially valid instruction set.

	Args:
		payload: JSON text, JSON bytes or an already decoded object.

	Returns:
		ModificationSet.
	"""
	if payload is None:
		raise ModificationError("missing modification instructions")
	data = payload
	if isinstance(data, (bytes, bytearray)):
		try:
			data = bytes(data).decode("utf-8")
		except UnicodeDecodeError as error:
			raise ModificationError("modification instructions are not UTF-8") from error
	if isinstance(data, str):
		if not data.strip():
			raise ModificationError("missing modification instructions")
		try:
			data = json.loads(data)
		except json.JSONDecodeError as error:
			raise ModificationError(f"modification instructions are not valid JSON: {error}") from error
	if not isinstance(data, dict):
		raise ModificationError("modification instructions must be a JSON object")
	pages = data.get("pages")
	if pages is None:
		raise ModificationError("missing field 'pages'")
	if not isinstance(pages, list):
		raise ModificationError("field 'pages' must be a list")
	return ModificationSet(pages=[parse_page(entry, index) for index, entry in enumerate(pages)])


#============================================
def plan_page(labels: list[Label], config: EditConfig) -> PageModification:
	"""
	Build the instructions for one page from its labels.

	Args:
		labels: Labels found on the page.
		config: Edit configuration.

	Returns:
		PageModification.
	"""
	page_mod = PageModification()
	for label in labels:
		if config.text_to_remove:
			page_mod.remove_areas.extend(page_removal_areas(label, config.text_to_remove))
		if config.add_text:
			page_mod.add_text.append(
				TextAddition(
					text=config.insert_text,
					x=label.box.x + label.box.width / 2.0,
					y=label.box.y + INSERT_MARGIN,
					font_size=config.font_size,
				)
			)
	return page_mod


#============================================
def plan_modifications(page_labels: list[list[Label]], config: EditConfig) -> ModificationSet:
	"""
	Build an instruction set for a whole document.

	Args:
		page_labels: Labels per page, in page order.
		config: Edit configuration.

	Returns:
		ModificationSet with one entry per page.
	"""
	return ModificationSet(pages=[plan_page(labels, config) for labels in page_labels])
