"""
test_taggers.py - Tests for the DOM, UUID, language and content-type taggers
"""

import uuid
from types import SimpleNamespace

import pytest
from langdetect.lang_detect_exception import LangDetectException

from importer.doc import (
    DOC_CHARSET,
    DOC_CONTENT_LENGTH,
    DOC_LANGUAGE,
    DOC_MIMETYPE,
    HTTP_CONTENT_TYPE,
    ImporterDocument,
)
from importer.errors import ConfigurationError
from importer.handlers import (
    ContentTypeTagger,
    DOMTagger,
    LanguageTagger,
    UUIDTagger,
    build_handler,
)
from importer.handlers.parsing.content_type import detect_content_type
from importer.handlers.tagging import language


class TestDOMTagger:
    """Test CSS selector extraction into metadata"""

    def test_selects_text_in_document_order(self):
        doc = ImporterDocument("page.html", "A <h2>One</h2> B <h2>Two</h2>")

        DOMTagger("h2", "headings").tag_document(doc)

        assert doc.metadata.get_values("headings") == ["One", "Two"]

    def test_attribute_extraction(self):
        doc = ImporterDocument(
            "page.html", '<a href="/x">X</a><a>no href</a><a href="/y">Y</a>'
        )

        DOMTagger("a", "links", extract="attr:href").tag_document(doc)

        assert doc.metadata.get_values("links") == ["/x", "/y"]

    def test_html_extraction(self):
        doc = ImporterDocument("page.html", "<div><p class='k'>hi</p></div>")

        DOMTagger("p.k", "raw", extract="html").tag_document(doc)

        assert doc.metadata.get_values("raw") == ['<p class="k">hi</p>']

    def test_appends_unless_overwrite(self):
        doc = ImporterDocument("page.html", "<title>New</title>")
        doc.metadata.add_values("title", "Old")

        DOMTagger("title", "title").tag_document(doc)
        assert doc.metadata.get_values("title") == ["Old", "New"]

        DOMTagger("title", "title", overwrite=True).tag_document(doc)
        assert doc.metadata.get_values("title") == ["New"]

    def test_declared_charset_used(self):
        doc = ImporterDocument("page.html", "<h1>Café</h1>".encode("latin-1"))
        doc.metadata.set_values(DOC_CHARSET, "latin-1")

        DOMTagger("h1", "h").tag_document(doc)

        assert doc.metadata.get_values("h") == ["Café"]

    def test_no_match_adds_nothing(self):
        doc = ImporterDocument("page.html", "<p>text</p>")

        DOMTagger("h1", "h").tag_document(doc)

        assert doc.metadata.get_values("h") == []

    def test_invalid_selector_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            DOMTagger("h2[", "headings")

    def test_invalid_extract_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            DOMTagger("h2", "headings", extract="attr:")

    def test_from_config_requires_to_field(self):
        with pytest.raises(ConfigurationError, match="to_field"):
            build_handler({"class": "DOMTagger", "selector": "h2"})


class TestUUIDTagger:
    """Test UUID assignment"""

    def test_sets_valid_uuid(self):
        doc = ImporterDocument("ref", b"")

        UUIDTagger().tag_document(doc)

        value = doc.metadata.get_first("document.uuid")
        assert str(uuid.UUID(value)) == value

    def test_overwrite_replaces_previous(self):
        doc = ImporterDocument("ref", b"")
        tagger = UUIDTagger(field="id")
        tagger.tag_document(doc)
        tagger.tag_document(doc)

        assert len(doc.metadata.get_values("id")) == 1

    def test_append_mode(self):
        doc = ImporterDocument("ref", b"")
        tagger = UUIDTagger(field="id", overwrite=False)
        tagger.tag_document(doc)
        tagger.tag_document(doc)

        values = doc.metadata.get_values("id")
        assert len(values) == 2
        assert values[0] != values[1]

    @pytest.mark.parametrize(
        "config",
        [
            {"class": "UUIDTagger", "overwrite": "false"},
            {
                "class": "TextBetweenTagger",
                "inclusive": 1,
                "betweens": [{"name": "v", "start": "<", "end": ">"}],
            },
            {"class": "RegexContentFilter", "regex": "x", "case_sensitive": "no"},
            {"class": "TextSplitter", "separator": ",", "keep_empty": "true"},
            {"class": "DOMTagger", "selector": "p", "to_field": "f", "overwrite": None},
        ],
    )
    def test_non_boolean_flags_rejected(self, config):
        with pytest.raises(ConfigurationError, match=f"{config['class']}: .* must be true or false"):
            build_handler(config)

    def test_boolean_flag_from_config(self):
        tagger = build_handler({"class": "UUIDTagger", "overwrite": False})

        assert tagger.overwrite is False


class TestLanguageTagger:
    """Test language detection with a stubbed detector"""

    def test_sets_language_above_threshold(self, monkeypatch):
        monkeypatch.setattr(
            language, "detect_langs", lambda _text: [SimpleNamespace(lang="fr", prob=0.97)]
        )
        doc = ImporterDocument("ref", "Bonjour tout le monde")

        LanguageTagger().tag_document(doc)

        assert doc.metadata.get_values(DOC_LANGUAGE) == ["fr"]

    def test_below_threshold_sets_nothing(self, monkeypatch):
        monkeypatch.setattr(
            language, "detect_langs", lambda _text: [SimpleNamespace(lang="fr", prob=0.4)]
        )
        doc = ImporterDocument("ref", "Bonjour")

        LanguageTagger(min_probability=0.5).tag_document(doc)

        assert not doc.metadata.has_values(DOC_LANGUAGE)

    def test_detector_failure_is_not_an_error(self, monkeypatch):
        def fail(_text):
            raise LangDetectException(0, "No features in text.")

        monkeypatch.setattr(language, "detect_langs", fail)
        doc = ImporterDocument("ref", "12345")

        LanguageTagger().tag_document(doc)

        assert not doc.metadata.has_values(DOC_LANGUAGE)

    def test_sample_is_truncated(self, monkeypatch):
        seen = []

        def record(text):
            seen.append(text)
            return [SimpleNamespace(lang="en", prob=1.0)]

        monkeypatch.setattr(language, "detect_langs", record)
        doc = ImporterDocument("ref", "a" * 100)

        LanguageTagger(sample_size=10).tag_document(doc)

        assert seen == ["a" * 10]

    def test_blank_text_skips_detection(self, monkeypatch):
        monkeypatch.setattr(
            language, "detect_langs", lambda _text: pytest.fail("should not detect")
        )

        LanguageTagger().tag_document(ImporterDocument("ref", "   "))

    def test_invalid_probability(self):
        with pytest.raises(ConfigurationError):
            build_handler({"class": "LanguageTagger", "min_probability": "high"})
        with pytest.raises(ConfigurationError):
            LanguageTagger(min_probability=2)


class TestContentTypeTagger:
    """Test MIME type, charset and length recording"""

    def test_header_wins_and_parameters_stripped(self):
        doc = ImporterDocument("page.bin", b"%PDF-1.4 ...")
        doc.metadata.set_values(HTTP_CONTENT_TYPE, "text/html; charset=ISO-8859-1")

        ContentTypeTagger().tag_document(doc)

        assert doc.metadata.get_values(DOC_MIMETYPE) == ["text/html"]
        assert doc.metadata.get_values(DOC_CHARSET) == ["ISO-8859-1"]

    def test_detection_without_header(self):
        doc = ImporterDocument("report.bin", b"%PDF-1.7\n...")

        ContentTypeTagger().tag_document(doc)

        assert doc.metadata.get_values(DOC_MIMETYPE) == ["application/pdf"]
        assert doc.metadata.get_values(DOC_CONTENT_LENGTH) == [str(len(doc.content))]

    def test_existing_type_kept_unless_overwrite(self):
        doc = ImporterDocument("page.html", b"<html></html>")
        doc.metadata.set_values(DOC_MIMETYPE, "application/xhtml+xml")

        ContentTypeTagger().tag_document(doc)
        assert doc.metadata.get_values(DOC_MIMETYPE) == ["application/xhtml+xml"]

        ContentTypeTagger(overwrite=True).tag_document(doc)
        assert doc.metadata.get_values(DOC_MIMETYPE) == ["text/html"]


class TestDetectContentType:
    """Test the content-type detector collaborator"""

    @pytest.mark.parametrize(
        "content,name,expected",
        [
            (b"%PDF-1.5", "file.txt", "application/pdf"),
            (b"\x89PNG\r\n\x1a\n....", None, "image/png"),
            (b"  <!DOCTYPE html><html>", None, "text/html"),
            (b"plain words", None, "text/plain"),
            (b"just text", "page.html", "text/html"),
            (b"\xff\xfe\x00\x01\x02\x03\x04\x05", None, "application/octet-stream"),
            (b"", None, "application/octet-stream"),
        ],
    )
    def test_detect(self, content, name, expected):
        assert detect_content_type(content, name) == expected
