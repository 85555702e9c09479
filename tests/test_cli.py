import json
import pathlib

import pytest

import fnsku_label_editor.cli as cli

import pdf_fixtures


#============================================
def write_input(tmp_path: pathlib.Path) -> pathlib.Path:
	"""
	Write the standard label PDF to disk.
	"""
	path = tmp_path / "labels.pdf"
	path.write_bytes(pdf_fixtures.build_label_pdf())
	return path


#============================================
def test_edit_writes_default_output(tmp_path: pathlib.Path, capsys: pytest.CaptureFixture) -> None:
	"""
	Edit writes processed_<name> next to the input.
	"""
	input_path = write_input(tmp_path)
	code = cli.main(["edit", str(input_path), "-r", "SomeText", "-a", "-s", "9"])
	assert code == 0
	output_path = tmp_path / "processed_labels.pdf"
	assert output_path.exists()
	assert output_path.read_bytes().startswith(b"%PDF")
	out = capsys.readouterr().out
	assert "Labels found: 1" in out
	assert "Areas removed: 1" in out
	assert "Text added: 1" in out


#============================================
def test_plan_then_apply(tmp_path: pathlib.Path) -> None:
	"""
	Plan writes wire format JSON that apply accepts.
	"""
	input_path = write_input(tmp_path)
	plan_path = tmp_path / "mods.json"
	assert cli.main(["plan", str(input_path), "-o", str(plan_path), "-r", "SomeText", "-a"]) == 0
	data = json.loads(plan_path.read_text(encoding="utf-8"))
	assert len(data["pages"]) == 1
	assert len(data["pages"][0]["removeAreas"]) == 1
	assert data["pages"][0]["addText"][0]["text"] == "Made in China"

	output_path = tmp_path / "out.pdf"
	code = cli.main(["apply", str(input_path), "-m", str(plan_path), "-o", str(output_path)])
	assert code == 0
	assert output_path.exists()


#============================================
def test_scan_lists_labels(tmp_path: pathlib.Path, capsys: pytest.CaptureFixture) -> None:
	"""
	Scan prints each label with its member count.
	"""
	input_path = write_input(tmp_path)
	assert cli.main(["scan", str(input_path)]) == 0
	out = capsys.readouterr().out
	assert "Page 1: 1 labels" in out
	assert "X00ABCDEFGH" in out
	assert "items=2" in out


#============================================
def test_missing_input_file(tmp_path: pathlib.Path, capsys: pytest.CaptureFixture) -> None:
	"""
	A missing input is an input error.
	"""
	code = cli.main(["edit", str(tmp_path / "missing.pdf"), "-a"])
	assert code == 2
	assert "No such input file" in capsys.readouterr().out


#============================================
def test_bad_instructions_stop_before_writing(tmp_path: pathlib.Path, capsys: pytest.CaptureFixture) -> None:
	"""
	Invalid JSON is reported and no output is written.
	"""
	input_path = write_input(tmp_path)
	plan_path = tmp_path / "mods.json"
	plan_path.write_text("{\"pages\": [{\"removeAreas\": [{\"x\": 1}]}]}", encoding="utf-8")
	output_path = tmp_path / "out.pdf"
	code = cli.main(["apply", str(input_path), "-m", str(plan_path), "-o", str(output_path)])
	assert code == 2
	assert not output_path.exists()
	assert "Invalid modification instructions" in capsys.readouterr().out


#============================================
def test_missing_instructions_file(tmp_path: pathlib.Path) -> None:
	"""
	A missing instruction file is an input error.
	"""
	input_path = write_input(tmp_path)
	code = cli.main(["apply", str(input_path), "-m", str(tmp_path / "none.json")])
	assert code == 2


#============================================
def test_corrupt_document_is_generic_failure(tmp_path: pathlib.Path, capsys: pytest.CaptureFixture) -> None:
	"""
	Unreadable PDFs give a generic failure message.
	"""
	input_path = tmp_path / "broken.pdf"
	input_path.write_bytes(b"this is not a pdf")
	code = cli.main(["edit", str(input_path), "-a", "-o", str(tmp_path / "out.pdf")])
	assert code == 1
	assert "PDF processing failed" in capsys.readouterr().out
	assert not (tmp_path / "out.pdf").exists()


#============================================
@pytest.mark.parametrize("command", ["scan", "edit", "plan"])
def test_unsupported_stream_filter_is_generic_failure(
	command: str,
	tmp_path: pathlib.Path,
	capsys: pytest.CaptureFixture,
) -> None:
	"""
	A page the PDF library cannot decode gives the generic failure message.
	"""
	input_path = tmp_path / "filtered.pdf"
	input_path.write_bytes(pdf_fixtures.build_unsupported_filter_pdf())
	argv = [command, str(input_path)]
	if command != "scan":
		argv += ["-a", "-o", str(tmp_path / "out")]
	assert cli.main(argv) == 1
	assert "PDF processing failed" in capsys.readouterr().out
	assert not (tmp_path / "out").exists()


#============================================
def test_build_config_from_args() -> None:
	"""
	CLI options map onto the edit config.
	"""
	args = cli.parse_args(["plan", "in.pdf", "-r", "Brand New", "-a", "-t", "Hecho", "-s", "abc", "--window-x", "80"])
	edit = cli.build_config(args)
	assert edit.text_to_remove == "Brand New"
	assert edit.add_text is True
	assert edit.insert_text == "Hecho"
	assert edit.font_size == 8.0
	assert edit.window_x == 80.0
	assert edit.window_y == 60.0


#============================================
def test_default_output_path() -> None:
	"""
	Default outputs are prefixed and may change suffix.
	"""
	path = pathlib.Path("/tmp/a/labels.pdf")
	assert cli.default_output_path(path) == pathlib.Path("/tmp/a/processed_labels.pdf")
	assert cli.default_output_path(path, ".json") == pathlib.Path("/tmp/a/processed_labels.json")
