import pytest

from codebook_outline.locate import MAX_SECTION_CHARS, SectionNotFoundError, heading_candidates, locate_section
from codebook_outline.models import OutlineNode
from codebook_outline.normalize import NormalizedViewCache


def _node(code: str, title: str) -> OutlineNode:
    return OutlineNode(key="chapter-0-node-0", code=code, title=title, level=1)


class TestHeadingCandidates:
    def test_priority_order(self) -> None:
        assert heading_candidates(_node("5.2", "Loads")) == ["5.2 loads", "5.2-loads", "5.2", "loads"]

    def test_blank_code(self) -> None:
        assert heading_candidates(_node("", "General  Provisions")) == [
            "general provisions",
            "-general provisions",
            "general provisions",
        ]


class TestLocateSection:
    def test_span_ends_before_next_section(self) -> None:
        raw = "Intro text. 5.2 Loads: dead loads shall be computed. 5.3 Combinations apply."
        span = locate_section(_node("5.2", "Loads"), raw)
        assert span.section_text == "5.2 Loads: dead loads shall be computed."
        assert span.matched_heading == "5.2 loads"
        assert not span.truncated

    def test_span_is_verbatim_slice(self, raw_text) -> None:
        span = locate_section(_node("5.2", "Loads"), raw_text)
        assert raw_text[span.start_offset:span.end_offset].strip() == span.section_text
        assert span.section_text.startswith("5.2 Loads: dead loads shall be determined")
        assert "Dead loads include the weight of walls" in span.section_text
        assert "5.3" not in span.section_text

    def test_sub_codes_are_not_boundaries(self) -> None:
        raw = "5.2 Loads see 5.2.1 and 5.2.1.4 for details. 5.3 Next"
        span = locate_section(_node("5.2", "Loads"), raw)
        assert span.section_text == "5.2 Loads see 5.2.1 and 5.2.1.4 for details."

    def test_non_ascii_digits_are_not_boundaries(self) -> None:
        raw = "5.2 Loads body text ٥.٣ more body 5.3 Next"
        span = locate_section(_node("5.2", "Loads"), raw)
        assert span.section_text == "5.2 Loads body text ٥.٣ more body"

    def test_parent_span_includes_children(self, raw_text) -> None:
        span = locate_section(_node("5.1", "Scope"), raw_text)
        assert "5.1.2 Basis" in span.section_text
        assert "5.2 Loads" not in span.section_text

    def test_title_only_match(self) -> None:
        raw = "Preamble. General Provisions\nAll work shall comply. 2.1 Next"
        span = locate_section(_node("", "General Provisions"), raw)
        assert span.section_text == "General Provisions\nAll work shall comply."

    def test_case_and_whitespace_insensitive(self) -> None:
        raw = "text 5.2\n   LOADS\nbody 5.3 x"
        span = locate_section(_node("5.2", "Loads"), raw)
        assert span.section_text == "5.2\n   LOADS\nbody"

    def test_last_section_is_truncated_at_end_of_text(self) -> None:
        raw = "intro 9.9 Last section with no further codes"
        span = locate_section(_node("9.9", "Last"), raw)
        assert span.truncated
        assert span.end_offset == len(raw)
        assert span.section_text == "9.9 Last section with no further codes"

    def test_long_section_is_capped(self) -> None:
        raw = "9.9 Last " + "word " * 5000
        span = locate_section(_node("9.9", "Last"), raw)
        assert span.truncated
        assert span.end_offset - span.start_offset == MAX_SECTION_CHARS

    def test_missing_heading_raises(self, raw_text) -> None:
        node = _node("5.9", "Seismic Provisions")
        with pytest.raises(SectionNotFoundError) as exc:
            locate_section(node, raw_text)
        assert exc.value.node is node

    def test_empty_text_raises(self) -> None:
        with pytest.raises(SectionNotFoundError):
            locate_section(_node("5.2", "Loads"), "")

    def test_shared_cache_builds_view_once(self, raw_text) -> None:
        cache = NormalizedViewCache(capacity=2)
        first = locate_section(_node("5.2", "Loads"), raw_text, cache=cache, cache_key="fire2016")
        second = locate_section(_node("5.3", "Combinations"), raw_text, cache=cache, cache_key="fire2016")
        assert len(cache) == 1
        assert first.end_offset <= second.start_offset
