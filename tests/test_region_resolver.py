import pytest

import fnsku_label_editor.content_stream as content_stream
import fnsku_label_editor.resolve as resolve
import fnsku_label_editor.segment as segment


PAGE_HEIGHT = 800.0


#============================================
def build_scenario_label() -> segment.Label:
	"""
	Label for an anchor at (100, 700) with "SomeText" at (90, 690).
	"""
	tokens = [
		content_stream.build_token("B0ABCDEFGH", (10.0, 0.0, 0.0, 10.0, 100.0, 700.0)),
		content_stream.build_token("SomeText", (10.0, 0.0, 0.0, 10.0, 90.0, 690.0)),
	]
	return segment.labels_for_page(tokens, PAGE_HEIGHT)[0]


#============================================
def test_normalize_text() -> None:
	"""
	Whitespace is removed and text lower-cased.
	"""
	assert resolve.normalize_text(" Made in\tChina\n") == "madeinchina"


#============================================
def test_removal_area_for_scenario() -> None:
	"""
	The matched token box grows by 2 and is flipped into the label frame.
	"""
	label = build_scenario_label()
	areas = resolve.find_removal_areas(label, "SomeText")
	assert len(areas) == 1
	area = areas[0]
	# SomeText in top-left space spans x 90..134 and y 100..110
	assert area.x == pytest.approx(88.0)
	assert area.width == pytest.approx(48.0)
	assert area.height == pytest.approx(14.0)
	assert area.y == pytest.approx(label.box.height + label.box.y - 110.0 - 2.0)


#============================================
def test_removal_area_in_page_space() -> None:
	"""
	Moving the area out of the label frame lands it on the token.
	"""
	label = build_scenario_label()
	areas = resolve.page_removal_areas(label, "Some Text")
	assert len(areas) == 1
	assert areas[0].y == pytest.approx(690.0 - 2.0)
	assert areas[0].x == pytest.approx(88.0)


#============================================
def test_phrase_matches_several_tokens() -> None:
	"""
	Every token contained in the phrase joins the union.
	"""
	tokens = [
		content_stream.Token("X00ABCDEFGH", 100.0, 90.0, 60.0, 10.0),
		content_stream.Token("Brand", 100.0, 100.0, 30.0, 10.0),
		content_stream.Token("New", 140.0, 104.0, 20.0, 8.0),
	]
	label = segment.find_labels(tokens, PAGE_HEIGHT)[0]
	area = resolve.find_removal_areas(label, "brand new")[0]
	assert area.x == pytest.approx(98.0)
	assert area.width == pytest.approx(64.0)
	assert area.height == pytest.approx(16.0)


#============================================
def test_token_larger_than_phrase_does_not_match() -> None:
	"""
	Matching is phrase-contains-token, not the reverse.
	"""
	label = build_scenario_label()
	assert resolve.find_removal_areas(label, "Some") == []


#============================================
def test_no_match_and_empty_phrase_give_nothing() -> None:
	"""
	Zero matches and empty phrases are not errors.
	"""
	label = build_scenario_label()
	assert resolve.find_removal_areas(label, "Made in China") == []
	assert resolve.find_removal_areas(label, "") == []
	assert resolve.find_removal_areas(label, "  \n") == []
	assert resolve.page_removal_areas(label, "") == []


#============================================
def test_whitespace_tokens_never_match() -> None:
	"""
	Tokens that normalize to nothing are not part of any phrase.
	"""
	tokens = [
		content_stream.Token("B0ABCDEFGH", 100.0, 90.0, 55.0, 10.0),
		content_stream.Token("   ", 110.0, 95.0, 5.0, 10.0),
	]
	label = segment.find_labels(tokens, PAGE_HEIGHT)[0]
	assert len(label.items) == 2
	assert resolve.find_removal_areas(label, "anything") == []


#============================================
def test_removal_is_idempotent() -> None:
	"""
	Same label and phrase give the same rectangle.
	"""
	label = build_scenario_label()
	first = resolve.find_removal_areas(label, "SomeText")
	second = resolve.find_removal_areas(label, "SomeText")
	assert first == second


#============================================
def test_place_text_scenario() -> None:
	"""
	Text is centered on the box and 2 units above its bottom.
	"""
	box = segment.Rect(x=0.0, y=0.0, width=200.0, height=50.0)
	placement = resolve.place_text("Made in China", 8.0, box)
	text_width = resolve.estimate_text_width("Made in China", 8.0)
	assert text_width == pytest.approx(13 * 8.0 * 0.55)
	assert placement.x == pytest.approx(100.0 - text_width / 2.0)
	assert placement.y == pytest.approx(2.0)
	assert placement.font_size == 8.0
	assert placement.text == "Made in China"


#============================================
def test_place_text_in_offset_box() -> None:
	"""
	Placement follows the box origin.
	"""
	box = segment.Rect(x=90.0, y=690.0, width=65.0, height=20.0)
	placement = resolve.place_text("Hi", 10.0, box)
	assert placement.x == pytest.approx(122.5 - 5.5)
	assert placement.y == pytest.approx(692.0)
