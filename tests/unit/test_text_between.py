"""
test_text_between.py - Tests for the delimited-range extractor
"""

import pytest

from importer.doc import ImporterDocument
from importer.errors import ConfigurationError
from importer.handlers import TextBetween, TextBetweenTagger, build_handler


def _tag(tagger, text):
    doc = ImporterDocument("doc-1", text)
    tagger.tag_document(doc)
    return doc.metadata


class TestExtraction:
    """Test range discovery and extraction"""

    def test_exclusive_strips_delimiters(self):
        tagger = TextBetweenTagger([TextBetween("content", "OPEN", "CLOSE")])

        metadata = _tag(tagger, "x OPEN hello CLOSE y")

        assert metadata.get_values("content") == [" hello "]

    def test_inclusive_keeps_delimiters(self):
        tagger = TextBetweenTagger(
            [TextBetween("content", "OPEN", "CLOSE")], inclusive=True
        )

        metadata = _tag(tagger, "x OPEN hello CLOSE y")

        assert metadata.get_values("content") == ["OPEN hello CLOSE"]

    def test_pairs_applied_in_sort_order(self):
        """Values land in (start, end, name) order, not declaration order"""
        tagger = TextBetweenTagger(
            [TextBetween("f", "<b>", "</b>"), TextBetween("f", "<a>", "</a>")]
        )

        metadata = _tag(tagger, "<b>bee</b> <a>ay</a>")

        assert [b.start for b in tagger.betweens] == ["<a>", "<b>"]
        assert metadata.get_values("f") == ["ay", "bee"]

    def test_unterminated_start_extracts_nothing(self):
        tagger = TextBetweenTagger([TextBetween("content", "OPEN", "CLOSE")])

        metadata = _tag(tagger, "x OPEN never ends")

        assert metadata.get_values("content") == []

    def test_case_insensitive_end_can_match_inside_words(self):
        """Without case sensitivity, "closed" contains an end match"""
        tagger = TextBetweenTagger([TextBetween("content", "OPEN", "CLOSE")])

        assert tagger.extract("x OPEN never closed") == [("content", " never ")]
        assert TextBetweenTagger(
            [TextBetween("content", "OPEN", "CLOSE")], case_sensitive=True
        ).extract("x OPEN never closed") == []

    def test_unterminated_start_stops_the_pair(self):
        """Ranges before the unterminated start are kept, none after it"""
        tagger = TextBetweenTagger([TextBetween("v", r"\[", r"\]")])

        assert tagger.extract("[a] [b") == [("v", "a")]

    def test_reverse_discovery_order(self):
        tagger = TextBetweenTagger([TextBetween("v", "<", ">")])

        metadata = _tag(tagger, "<one> <two> <three>")

        assert metadata.get_values("v") == ["three", "two", "one"]

    def test_empty_captures_are_kept(self):
        tagger = TextBetweenTagger([TextBetween("v", "<", ">")])

        assert _tag(tagger, "<>").get_values("v") == [""]

    def test_nearest_end_after_start(self):
        tagger = TextBetweenTagger([TextBetween("v", "OPEN", "CLOSE")])

        assert tagger.extract("OPEN a CLOSE b CLOSE") == [("v", " a ")]

    def test_dot_matches_newline(self):
        tagger = TextBetweenTagger(
            [TextBetween("v", "<s>.", ".</s>")], inclusive=False
        )

        assert tagger.extract("<s>\nline\n</s>") == [("v", "line")]

    def test_case_insensitive_by_default(self):
        tagger = TextBetweenTagger([TextBetween("v", "open", "close")])

        assert tagger.extract("OPEN x CLOSE") == [("v", " x ")]

    def test_case_sensitive(self):
        tagger = TextBetweenTagger(
            [TextBetween("v", "open", "close")], case_sensitive=True
        )

        assert tagger.extract("OPEN x CLOSE") == []

    def test_exclusive_values_never_contain_delimiters(self):
        tagger = TextBetweenTagger([TextBetween("v", "START", "END")])
        text = "START one END START two END noise START three END"

        values = [value for _, value in tagger.extract(text)]

        assert len(values) == 3
        assert all("START" not in v and "END" not in v for v in values)

    def test_existing_values_are_appended_to(self):
        tagger = TextBetweenTagger([TextBetween("v", "<", ">")])
        doc = ImporterDocument("doc-1", "<new>")
        doc.metadata.add_values("v", "old")

        tagger.tag_document(doc)

        assert doc.metadata.get_values("v") == ["old", "new"]


class TestConfiguration:
    """Test construction-time validation and config round trip"""

    def test_malformed_regex_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            TextBetweenTagger([TextBetween("v", "(", ")")])

    def test_blank_pair_is_configuration_error(self):
        with pytest.raises(ConfigurationError, match="blank 'end'"):
            TextBetweenTagger([TextBetween("v", "a", " ")])

    def test_at_least_one_pair(self):
        with pytest.raises(ConfigurationError):
            TextBetweenTagger([])

    def test_duplicate_pairs_collapse(self):
        tagger = TextBetweenTagger(
            [TextBetween("v", "<", ">"), TextBetween("v", "<", ">")]
        )

        assert len(tagger.betweens) == 1

    def test_from_config_round_trip(self):
        config = {
            "class": "TextBetweenTagger",
            "inclusive": True,
            "case_sensitive": False,
            "betweens": [{"name": "v", "start": "<", "end": ">"}],
            "restrict_to": [{"field": "type", "regex": "text/.*", "case_sensitive": False}],
        }

        tagger = build_handler(config)

        assert isinstance(tagger, TextBetweenTagger)
        assert tagger.to_config() == config
        assert build_handler(tagger.to_config()) == tagger

    def test_betweens_must_be_list(self):
        with pytest.raises(ConfigurationError):
            build_handler({"class": "TextBetweenTagger", "betweens": "oops"})
