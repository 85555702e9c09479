"""
CLI entry points for FNSKU label editing.
"""

# Standard Library
import argparse
import pathlib
import time

# local repo modules
import fnsku_label_editor as fle
import fnsku_label_editor.config
import fnsku_label_editor.modifications
import fnsku_label_editor.render


EditConfig = fle.config.EditConfig
ModificationError = fle.modifications.ModificationError
DocumentError = fle.render.DocumentError

DEFAULT_INSERT_TEXT = fle.config.DEFAULT_INSERT_TEXT
SEARCH_WINDOW_X = fle.config.SEARCH_WINDOW_X
SEARCH_WINDOW_Y = fle.config.SEARCH_WINDOW_Y
OUTPUT_PREFIX = fle.config.OUTPUT_PREFIX


#============================================
def build_config(args: argparse.Namespace) -> EditConfig:
	"""
	Build edit config from CLI args.

	Args:
		args: Parsed argparse namespace.

	Returns:
		EditConfig.
	"""
	return EditConfig(
		text_to_remove=args.text_to_remove or "",
		add_text=args.add_text,
		insert_text=args.insert_text,
		font_size=fle.config.parse_font_size(args.font_size),
		window_x=args.window_x,
		window_y=args.window_y,
	)


#============================================
def default_output_path(input_path: pathlib.Path, suffix: str | None = None) -> pathlib.Path:
	"""
	Build the default output path next to the input.

	Args:
		input_path: Input PDF path.
		suffix: Optional replacement suffix.

	Returns:
		Output path like processed_<name>.
	"""
	output_path = input_path.with_name(OUTPUT_PREFIX + input_path.name)
	if suffix is not None:
		output_path = output_path.with_suffix(suffix)
	return output_path


#============================================
def add_edit_arguments(parser: argparse.ArgumentParser) -> None:
	"""
	Add the label edit options shared by edit and plan.

	Args:
		parser: Subcommand parser.
	"""
	edit_group = parser.add_argument_group("Edits")
	edit_group.add_argument("-r", "--remove", dest="text_to_remove", default="", help="Text to white out inside each label.")
	edit_group.add_argument("-a", "--add-text", dest="add_text", action="store_true", help="Add text to each label.")
	edit_group.add_argument("-A", "--no-add-text", dest="add_text", action="store_false", help="Do not add text.")
	edit_group.add_argument("-t", "--insert-text", dest="insert_text", default=DEFAULT_INSERT_TEXT, help="Text to add.")
	edit_group.add_argument("-s", "--font-size", dest="font_size", default=None, help="Font size of added text.")

	detect_group = parser.add_argument_group("Detection")
	detect_group.add_argument("--window-x", dest="window_x", type=float, default=SEARCH_WINDOW_X, help="Horizontal search distance around an identifier.")
	detect_group.add_argument("--window-y", dest="window_y", type=float, default=SEARCH_WINDOW_Y, help="Vertical search distance around an identifier.")
	parser.set_defaults(add_text=False)


#============================================
def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse command line arguments.

	Args:
		argv: Optional argument list.

	Returns:
		Parsed argparse namespace.
	"""
	parser = argparse.ArgumentParser(description="Find FNSKU labels in a PDF and edit them.")
	subparsers = parser.add_subparsers(dest="command", required=True)

	edit_parser = subparsers.add_parser("edit", help="Detect labels and edit them in one pass.")
	edit_parser.add_argument("input", help="Input PDF.")
	edit_parser.add_argument("-o", "--output", dest="output_path", default=None, help="Output PDF path.")
	add_edit_arguments(edit_parser)
	edit_parser.set_defaults(handler=run_edit)

	plan_parser = subparsers.add_parser("plan", help="Write modification instructions as JSON.")
	plan_parser.add_argument("input", help="Input PDF.")
	plan_parser.add_argument("-o", "--output", dest="output_path", default=None, help="Output JSON path.")
	add_edit_arguments(plan_parser)
	plan_parser.set_defaults(handler=run_plan)

	apply_parser = subparsers.add_parser("apply", help="Apply modification instructions to a PDF.")
	apply_parser.add_argument("input", help="Input PDF.")
	apply_parser.add_argument("-m", "--modifications", dest="modifications_path", required=True, help="Modification JSON path.")
	apply_parser.add_argument("-o", "--output", dest="output_path", default=None, help="Output PDF path.")
	apply_parser.set_defaults(handler=run_apply)

	scan_parser = subparsers.add_parser("scan", help="List the labels found on each page.")
	scan_parser.add_argument("input", help="Input PDF.")
	scan_parser.add_argument("--window-x", dest="window_x", type=float, default=SEARCH_WINDOW_X, help="Horizontal search distance around an identifier.")
	scan_parser.add_argument("--window-y", dest="window_y", type=float, default=SEARCH_WINDOW_Y, help="Vertical search distance around an identifier.")
	scan_parser.set_defaults(handler=run_scan)

	args = parser.parse_args(argv)
	return args


#============================================
def run_edit(args: argparse.Namespace) -> None:
	"""
	Detect labels and write the edited PDF.

	Args:
		args: Parsed argparse namespace.
	"""
	input_path = pathlib.Path(args.input)
	output_path = pathlib.Path(args.output_path or default_output_path(input_path))
	config = build_config(args)
	print("FNSKU label edit")
	print(f"Input PDF: {input_path}")
	print(f"Output PDF: {output_path}")
	if config.text_to_remove:
		print(f"Remove text: {config.text_to_remove}")
	if config.add_text:
		print(f"Add text: {config.insert_text} ({config.font_size:g}pt)")

	start_time = time.perf_counter()
	result = fle.render.edit_document(input_path.read_bytes(), config, verbose=True)
	output_path.write_bytes(result.pdf_bytes)
	total_time = time.perf_counter() - start_time
	print(f"Pages written: {result.pages}")
	print(f"Labels found: {result.labels}")
	print(f"Areas removed: {result.removed_areas}")
	print(f"Text added: {result.added_texts}")
	print(f"Timing: total={total_time:.2f}s")


#============================================
def run_plan(args: argparse.Namespace) -> None:
	"""
	Detect labels and write modification instructions.

	Args:
		args: Parsed argparse namespace.
	"""
	input_path = pathlib.Path(args.input)
	output_path = pathlib.Path(args.output_path or default_output_path(input_path, ".json"))
	config = build_config(args)
	modifications = fle.render.plan_document(input_path.read_bytes(), config)
	output_path.write_text(modifications.to_json() + "\n", encoding="utf-8")
	print(f"Pages planned: {len(modifications.pages)}")
	print(f"Instructions written: {output_path}")


#============================================
def run_apply(args: argparse.Namespace) -> None:
	"""
	Apply modification instructions and write the PDF.

	Args:
		args: Parsed argparse namespace.
	"""
	input_path = pathlib.Path(args.input)
	output_path = pathlib.Path(args.output_path or default_output_path(input_path))
	modifications_path = pathlib.Path(args.modifications_path)
	if not modifications_path.is_file():
		raise ModificationError(f"modification file not found: {modifications_path}")
	modifications = fle.modifications.parse_modifications(modifications_path.read_bytes())
	result = fle.render.apply_modifications(input_path.read_bytes(), modifications, verbose=True)
	output_path.write_bytes(result.pdf_bytes)
	print(f"Pages written: {result.pages}")
	print(f"Areas removed: {result.removed_areas}")
	print(f"Text added: {result.added_texts}")


#============================================
def run_scan(args: argparse.Namespace) -> None:
	"""
	Print the labels found on each page.

	Args:
		args: Parsed argparse namespace.
	"""
	config = EditConfig(window_x=args.window_x, window_y=args.window_y)
	page_labels = fle.render.scan_document(pathlib.Path(args.input).read_bytes(), config)
	for page_index, labels in enumerate(page_labels, start=1):
		print(f"Page {page_index}: {len(labels)} labels")
		for label in labels:
			box = label.box
			print(
				f"  {label.anchor.text.strip()} box=({box.x:.1f}, {box.y:.1f}, "
				f"{box.width:.1f} x {box.height:.1f}) items={len(label.items)}"
			)


#============================================
def main(argv: list[str] | None = None) -> int:
	"""
	Main entry point.

	Args:
		argv: Optional argument list.

	Returns:
		Process exit code.
	"""
	args = parse_args(argv)
	if not pathlib.Path(args.input).is_file():
		print(f"No such input file: {args.input}")
		return 2
	try:
		args.handler(args)
	except ModificationError as error:
		print(f"Invalid modification instructions: {error}")
		return 2
	except DocumentError:
		print("PDF processing failed: the file format is not supported or its content could not be parsed.")
		return 1
	return 0
