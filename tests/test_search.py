import pytest

from codebook_outline.models import Chapter
from codebook_outline.search import detect_section_code, find_best_match, score_match


@pytest.fixture
def corpus(chapters) -> dict[str, list[Chapter]]:
    admin = Chapter(
        number=1,
        title="Scope and Administration",
        sections=[{"code": "101", "title": "Scope and General Requirements"}, {"code": "102", "title": "Applicability"}],
    )
    return {"FIRE2016": chapters, "BCP2021": [admin]}


class TestScoreMatch:
    @pytest.mark.parametrize(
        "label,term,score",
        [
            ("5.2 Loads", "5.2  LOADS", 200),
            ("5.2 Loads", "5.2", 130),
            ("5.2 Loads", "loads", 80),
            ("5.2 Loads", "snow", 0),
            ("", "loads", 0),
            ("5.2 Loads", "   ", 0),
        ],
    )
    def test_tiers(self, label, term, score) -> None:
        assert score_match(label, term) == score

    def test_detect_section_code(self) -> None:
        assert detect_section_code("see 10.2.3 exits") == "10.2.3"
        assert detect_section_code("chapter 10") == ""
        assert detect_section_code("see \u0661\u0660.\u0662 exits") == ""


class TestFindBestMatch:
    def test_exact_section_with_code(self, corpus) -> None:
        target = find_best_match(corpus, "5.2 Loads")
        assert target.document == "FIRE2016"
        assert target.chapter_number == 5
        assert target.section_code == "5.2"
        assert target.score == 200 + 90 + 120
        assert target.exact_match
        assert target.notice == ""

    def test_ties_keep_first_candidate(self, corpus) -> None:
        target = find_best_match(corpus, "load")
        assert target.section_code == "5.2"
        assert target.score == 80 + 90
        assert not target.exact_match
        assert target.notice == 'No exact match for "load". Showing the closest result.'

    def test_document_name(self, corpus) -> None:
        target = find_best_match(corpus, "bcp2021")
        assert target.document == "BCP2021"
        assert target.chapter_number is None
        assert target.exact_match

    def test_chapter_label(self, corpus) -> None:
        target = find_best_match(corpus, "Chapter 5")
        assert target.document == "FIRE2016"
        assert target.chapter_number == 5
        assert target.section_code == ""
        assert target.exact_match

    def test_code_in_free_text(self, corpus) -> None:
        target = find_best_match(corpus, "see 5.1 requirements")
        assert target.section_code == "5.1"
        assert target.score == 120 + 90

    def test_no_match(self, corpus) -> None:
        assert find_best_match(corpus, "elevator pits") is None
        assert find_best_match(corpus, "   ") is None
        assert find_best_match({}, "loads") is None
