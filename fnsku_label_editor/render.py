"""
Document loading, overlay drawing and saving.
"""

# Standard Library
import io
import typing

# PIP3 modules
import pypdf
import pypdf.errors
import reportlab.pdfbase.pdfmetrics
import reportlab.pdfgen.canvas

# local repo modules
import fnsku_label_editor as fle
import fnsku_label_editor.config
import fnsku_label_editor.content_stream
import fnsku_label_editor.modifications
import fnsku_label_editor.resolve
import fnsku_label_editor.segment


EditConfig = fle.config.EditConfig
EditResult = fle.config.EditResult
Label = fle.segment.Label
Rect = fle.segment.Rect
TextPlacement = fle.resolve.TextPlacement
ModificationSet = fle.modifications.ModificationSet
TextAddition = fle.modifications.TextAddition
ModificationError = fle.modifications.ModificationError

DEFAULT_FONT = fle.config.DEFAULT_FONT
REMOVE_FILL_COLOR = fle.config.REMOVE_FILL_COLOR
TEXT_FILL_COLOR = fle.config.TEXT_FILL_COLOR
PROGRESS_BAR_WIDTH = fle.config.PROGRESS_BAR_WIDTH


class DocumentError(RuntimeError):
	"""
	Raised when a PDF cannot be read, drawn on or written.
	"""


#============================================
def print_page_progress(page_number: int, total_pages: int, edits: int) -> None:
	"""
	Print a page progress bar with the running edit count.

	The line is rewritten in place until the last page.

	Args:
		page_number: One based number of the page just finished.
		total_pages: Pages in the document.
		edits: Removal areas and text lines drawn so far.
	"""
	if total_pages <= 0:
		return
	filled = PROGRESS_BAR_WIDTH * page_number // total_pages
	bar = "#" * filled + "." * (PROGRESS_BAR_WIDTH - filled)
	line_end = "\n" if page_number >= total_pages else "\r"
	print(f"Page {page_number}/{total_pages} [{bar}] edits={edits}", end=line_end)


#============================================
def load_document(pdf_bytes: bytes) -> pypdf.PdfReader:
	"""
	Load a PDF document from bytes.

	Args:
		pdf_bytes: PDF file contents.

	Returns:
		pypdf reader with its page tree resolved.
	"""
	if not pdf_bytes:
		raise DocumentError("empty PDF document")
	try:
		reader = pypdf.PdfReader(io.BytesIO(pdf_bytes))
		page_count = len(reader.pages)
	except Exception as error:
		raise DocumentError("unable to read PDF document") from error
	if page_count == 0:
		raise DocumentError("PDF document has no pages")
	return reader


#============================================
def save_document(writer: pypdf.PdfWriter) -> bytes:
	"""
	Serialize a PDF writer to bytes.

	Args:
		writer: pypdf writer holding every page.

	Returns:
		PDF file contents.
	"""
	buffer = io.BytesIO()
	try:
		writer.write(buffer)
	except (pypdf.errors.PyPdfError, ValueError, KeyError) as error:
		raise DocumentError("unable to write PDF document") from error
	return buffer.getvalue()


#============================================
def page_size(page: pypdf.PageObject) -> tuple[float, float]:
	"""
	Read the page size from the media box.

	Args:
		page: pypdf page.

	Returns:
		Tuple of (width, height) in points.
	"""
	return (float(page.mediabox.width), float(page.mediabox.height))


#============================================
def find_page_labels(page: pypdf.PageObject, config: EditConfig) -> list[Label]:
	"""
	Run extraction and clustering on one page.

	Args:
		page: pypdf page.
		config: Edit configuration.

	Returns:
		Labels found on the page.
	"""
	_width, height = page_size(page)
	try:
		content = fle.content_stream.read_page_content(page)
	except (pypdf.errors.PyPdfError, ValueError, KeyError) as error:
		raise DocumentError("unable to read page content") from error
	return fle.segment.labels_from_content(content, height, config.window_x, config.window_y)


#============================================
def center_text_addition(addition: TextAddition) -> TextPlacement:
	"""
	Turn a centered text instruction into a left-edge placement.

	Args:
		addition: Text instruction whose x is the horizontal center.

	Returns:
		TextPlacement measured with the Helvetica metrics.
	"""
	width = reportlab.pdfbase.pdfmetrics.stringWidth(addition.text, DEFAULT_FONT, addition.font_size)
	return TextPlacement(
		text=addition.text,
		x=addition.x - width / 2.0,
		y=addition.y,
		font_size=addition.font_size,
	)


#============================================
def draw_remove_area(pdf: reportlab.pdfgen.canvas.Canvas, area: Rect) -> None:
	"""
	Draw an opaque white rectangle.

	Args:
		pdf: ReportLab canvas.
		area: Rectangle in page space.
	"""
	pdf.setFillColorRGB(*REMOVE_FILL_COLOR)
	pdf.rect(area.x, area.y, area.width, area.height, stroke=0, fill=1)


#============================================
def draw_placement(pdf: reportlab.pdfgen.canvas.Canvas, placement: TextPlacement) -> None:
	"""
	Draw a line of black text.

	Args:
		pdf: ReportLab canvas.
		placement: Text with its left edge and baseline.
	"""
	pdf.setFillColorRGB(*TEXT_FILL_COLOR)
	pdf.setFont(DEFAULT_FONT, placement.font_size)
	pdf.drawString(placement.x, placement.y, placement.text)


#============================================
def build_overlay(
	page_width: float,
	page_height: float,
	remove_areas: list[Rect],
	placements: list[TextPlacement],
) -> pypdf.PageObject:
	"""
	Build an overlay page with white-out areas and inserted text.

	Rectangles are drawn first so inserted text is never covered.

	Args:
		page_width: Page width in points.
		page_height: Page height in points.
		remove_areas: Rectangles to white out.
		placements: Text to draw.

	Returns:
		PDF page object.
	"""
	buffer = io.BytesIO()
	pdf = reportlab.pdfgen.canvas.Canvas(buffer, pagesize=(page_width, page_height))
	for area in remove_areas:
		draw_remove_area(pdf, area)
	for placement in placements:
		draw_placement(pdf, placement)
	pdf.save()
	buffer.seek(0)
	reader = pypdf.PdfReader(buffer)
	return reader.pages[0]


#============================================
def stamp_page(
	page: pypdf.PageObject,
	remove_areas: list[Rect],
	placements: list[TextPlacement],
) -> None:
	"""
	Merge an overlay onto a page when there is anything to draw.

	Args:
		page: pypdf page, modified in place.
		remove_areas: Rectangles to white out.
		placements: Text to draw.
	"""
	if not remove_areas and not placements:
		return
	width, height = page_size(page)
	overlay = build_overlay(width, height, remove_areas, placements)
	try:
		page.merge_page(overlay)
	except (pypdf.errors.PyPdfError, ValueError, KeyError) as error:
		raise DocumentError("unable to draw onto page") from error


#============================================
def run_document(pdf_bytes: bytes, process: typing.Callable[[pypdf.PdfReader], typing.Any]) -> typing.Any:
	"""
	Load a document and run one processing pass over it.

	Any failure inside the pass is raised as DocumentError.

	Args:
		pdf_bytes: PDF file contents.
		process: Callable taking the loaded reader.

	Returns:
		Whatever the pass returns.
	"""
	reader = load_document(pdf_bytes)
	try:
		return process(reader)
	except (DocumentError, ModificationError):
		raise
	except Exception as error:
		raise DocumentError("unable to process PDF document") from error


#============================================
def scan_pages(reader: pypdf.PdfReader, config: EditConfig) -> list[list[Label]]:
	return [find_page_labels(page, config) for page in reader.pages]


#============================================
def scan_document(pdf_bytes: bytes, config: EditConfig | None = None) -> list[list[Label]]:
	"""
	Find the labels on every page of a document.

	Args:
		pdf_bytes: PDF file contents.
		config: Optional edit configuration for the search window.

	Returns:
		Labels per page, in page order.
	"""
	if config is None:
		config = EditConfig()
	return run_document(pdf_bytes, lambda reader: scan_pages(reader, config))


#============================================
def plan_document(pdf_bytes: bytes, config: EditConfig) -> ModificationSet:
	"""
	Compute the modification instructions for a document.

	Args:
		pdf_bytes: PDF file contents.
		config: Edit configuration.

	Returns:
		ModificationSet with one entry per page.
	"""
	page_labels = scan_document(pdf_bytes, config)
	return fle.modifications.plan_modifications(page_labels, config)


#============================================
def edit_pages(reader: pypdf.PdfReader, config: EditConfig, verbose: bool) -> EditResult:
	"""
	Apply the configured edits to every page of a loaded document.

	Args:
		reader: Loaded document.
		config: Edit configuration.
		verbose: Print progress.

	Returns:
		EditResult holding the modified PDF.
	"""
	writer = pypdf.PdfWriter()
	total_pages = len(reader.pages)
	label_count = 0
	removed_count = 0
	added_count = 0
	for index, page in enumerate(reader.pages, start=1):
		labels = find_page_labels(page, config)
		remove_areas: list[Rect] = []
		placements: list[TextPlacement] = []
		for label in labels:
			if config.text_to_remove:
				remove_areas.extend(fle.resolve.page_removal_areas(label, config.text_to_remove))
			if config.add_text:
				placements.append(fle.resolve.place_text(config.insert_text, config.font_size, label.box))
		stamp_page(page, remove_areas, placements)
		writer.add_page(page)
		label_count += len(labels)
		removed_count += len(remove_areas)
		added_count += len(placements)
		if verbose:
			print_page_progress(index, total_pages, removed_count + added_count)

	return EditResult(
		pdf_bytes=save_document(writer),
		pages=total_pages,
		labels=label_count,
		removed_areas=removed_count,
		added_texts=added_count,
	)


#============================================
def edit_document(pdf_bytes: bytes, config: EditConfig, verbose: bool = False) -> EditResult:
	"""
	Detect labels and apply the configured edits to every page.

	Args:
		pdf_bytes: PDF file contents.
		config: Edit configuration.
		verbose: Print progress.

	Returns:
		EditResult holding the modified PDF.
	"""
	return run_document(pdf_bytes, lambda reader: edit_pages(reader, config, verbose))


#============================================
def apply_pages(reader: pypdf.PdfReader, modifications: ModificationSet, verbose: bool) -> EditResult:
	"""
	Draw an instruction set onto every page of a loaded document.

	Args:
		reader: Loaded document.
		modifications: Validated instruction set.
		verbose: Print progress.

	Returns:
		EditResult holding the modified PDF.
	"""
	writer = pypdf.PdfWriter()
	total_pages = len(reader.pages)
	removed_count = 0
	added_count = 0
	for index, page in enumerate(reader.pages):
		page_mod = modifications.page(index)
		if page_mod is not None and not page_mod.is_empty():
			placements = [center_text_addition(addition) for addition in page_mod.add_text]
			stamp_page(page, page_mod.remove_areas, placements)
			removed_count += len(page_mod.remove_areas)
			added_count += len(placements)
		writer.add_page(page)
		if verbose:
			print_page_progress(index + 1, total_pages, removed_count + added_count)

	return EditResult(
		pdf_bytes=save_document(writer),
		pages=total_pages,
		labels=0,
		removed_areas=removed_count,
		added_texts=added_count,
	)


#============================================
def apply_modifications(
	pdf_bytes: bytes,
	modifications: ModificationSet,
	verbose: bool = False,
) -> EditResult:
	"""
	Draw a precomputed instruction set onto a document.

	Instructions for pages past the end of the document are ignored.

	Args:
		pdf_bytes: PDF file contents.
		modifications: Validated instruction set.
		verbose: Print progress.

	Returns:
		EditResult holding the modified PDF.
	"""
	return run_document(pdf_bytes, lambda reader: apply_pages(reader, modifications, verbose))
