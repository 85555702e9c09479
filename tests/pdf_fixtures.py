"""
Build small label PDFs for tests.
"""

# Standard Library
import io

# PIP3 modules
import pypdf
import pypdf.generic
import reportlab.lib.pagesizes
import reportlab.pdfgen.canvas


PAGE_WIDTH, PAGE_HEIGHT = reportlab.lib.pagesizes.letter

LABEL_TEXT = [
	("X00ABCDEFGH", 100.0, 700.0, 10.0),
	("SomeText", 90.0, 690.0, 10.0),
	("Unrelated", 400.0, 200.0, 10.0),
]


#============================================
def build_label_pdf(pages: list[list[tuple[str, float, float, float]]] | None = None) -> bytes:
	"""
	Build a PDF where every text run is positioned by its own text matrix.

	Args:
		pages: Per page list of (text, x, y, font_size). Defaults to one
			page holding LABEL_TEXT.

	Returns:
		PDF file contents.
	"""
	if pages is None:
		pages = [LABEL_TEXT]
	buffer = io.BytesIO()
	pdf = reportlab.pdfgen.canvas.Canvas(buffer, pagesize=(PAGE_WIDTH, PAGE_HEIGHT))
	for runs in pages:
		for value, x, y, font_size in runs:
			text = pdf.beginText()
			text.setFont("Helvetica", 1)
			text.setTextTransform(font_size, 0, 0, font_size, x, y)
			text.textOut(value)
			pdf.drawText(text)
		pdf.showPage()
	pdf.save()
	return buffer.getvalue()


#============================================
def build_unsupported_filter_pdf() -> bytes:
	"""
	Build a one page PDF whose content stream uses an unknown filter.

	Returns:
		PDF file contents.
	"""
	writer = pypdf.PdfWriter()
	page = writer.add_blank_page(width=PAGE_WIDTH, height=PAGE_HEIGHT)
	stream = pypdf.generic.StreamObject()
	stream.set_data(b"BT 10 0 0 10 100 700 Tm (X00ABCDEFGH) Tj ET")
	stream[pypdf.generic.NameObject("/Filter")] = pypdf.generic.NameObject("/FooDecode")
	page.replace_contents(stream)
	buffer = io.BytesIO()
	writer.write(buffer)
	return buffer.getvalue()
