"""
test_pdf.py - Tests for PDF extraction on PDFs built in memory with PyMuPDF
"""

import fitz
import pytest

from importer.doc import DOC_CHARSET, ImporterDocument
from importer.handlers import PDFParseTagger, build_handler
from importer.handlers.parsing.pdf import PDFExtractionError, extract_pdf


def make_pdf(pages=("Hello PDF",), user_pw=None, **info):
    doc = fitz.open()
    for text in pages:
        page = doc.new_page()
        page.insert_text((72, 72), text)
    if info:
        doc.set_metadata(info)
    if user_pw is not None:
        data = doc.tobytes(
            encryption=fitz.PDF_ENCRYPT_AES_256, owner_pw="owner-pw", user_pw=user_pw
        )
    else:
        data = doc.tobytes()
    doc.close()
    return data


class TestExtractPdf:
    """Test the binary-format parser"""

    def test_text_and_page_count(self):
        text, fields = extract_pdf(make_pdf(pages=("First page", "Second page")))

        assert "First page" in text
        assert "Second page" in text
        assert text.index("First page") < text.index("Second page")
        assert fields["xmpTPg:NPages"] == ["2"]
        assert fields["pdf:encrypted"] == ["false"]

    def test_document_info_fields(self):
        _, fields = extract_pdf(make_pdf(title="Annual Report", author="Jane Doe"))

        assert fields["dc:title"] == ["Annual Report"]
        assert fields["dc:creator"] == ["Jane Doe"]
        assert fields["pdf:PDFVersion"][0].startswith("1.")

    def test_encrypted_with_password(self):
        text, fields = extract_pdf(make_pdf(user_pw="secret"), password="secret")

        assert "Hello PDF" in text
        assert fields["pdf:encrypted"] == ["true"]

    def test_encrypted_wrong_password(self):
        with pytest.raises(PDFExtractionError, match="password"):
            extract_pdf(make_pdf(user_pw="secret"), password="wrong")

    def test_encrypted_without_password(self):
        with pytest.raises(PDFExtractionError):
            extract_pdf(make_pdf(user_pw="secret"))

    def test_empty_user_password_opens(self):
        text, _ = extract_pdf(make_pdf(user_pw=""))

        assert "Hello PDF" in text

    def test_not_a_pdf(self):
        with pytest.raises(PDFExtractionError):
            extract_pdf(b"definitely not a pdf")


class TestPDFParseTagger:
    """Test the tagger around the parser"""

    def test_replaces_content_and_merges_fields(self):
        doc = ImporterDocument("report.pdf", make_pdf(title="T"))

        PDFParseTagger().tag_document(doc)

        assert "Hello PDF" in doc.get_text()
        assert doc.metadata.get_values(DOC_CHARSET) == ["utf-8"]
        assert doc.metadata.get_values("dc:title") == ["T"]
        assert doc.metadata.get_values("xmpTPg:NPages") == ["1"]

    def test_password_from_metadata_wins(self):
        doc = ImporterDocument("report.pdf", make_pdf(user_pw="from-meta"))
        doc.metadata.set_values("pdf.password", "from-meta")

        PDFParseTagger(password="configured").tag_document(doc)

        assert "Hello PDF" in doc.get_text()

    def test_configured_password(self):
        doc = ImporterDocument("report.pdf", make_pdf(user_pw="configured"))

        PDFParseTagger(password="configured").tag_document(doc)

        assert "Hello PDF" in doc.get_text()

    def test_password_not_exported(self):
        tagger = build_handler({"class": "PDFParseTagger", "password": "secret"})

        assert "password" not in tagger.to_config()
        assert "secret" not in str(tagger)
