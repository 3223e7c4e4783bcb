import json

import fitz
import pytest

from codebook_outline import load_code_document
from codebook_outline.backends import get_backend, get_backend_for
from codebook_outline.core import DocumentTextCache, load_document, load_document_text, parse_outline
from codebook_outline.path_utils import resolve_document_paths
from scripts.convert_hierarchy_js import parse_hierarchy_js, slug_for


class TestDocumentPaths:
    def test_folder_outline_and_text_file(self, document_dir) -> None:
        folder = document_dir.resolve()
        expected = (folder / "outline.json", folder / "text.txt")
        assert resolve_document_paths(document_dir) == expected
        assert resolve_document_paths(document_dir / "outline.json") == expected
        assert resolve_document_paths(document_dir / "text.txt") == expected

    def test_missing_text_source(self, tmp_path) -> None:
        (tmp_path / "outline.json").write_text("[]", encoding="utf-8")
        with pytest.raises(ValueError, match="No .txt, .md or .pdf"):
            resolve_document_paths(tmp_path)

    def test_missing_path(self, tmp_path) -> None:
        with pytest.raises(ValueError):
            resolve_document_paths(tmp_path / "nope")

    def test_unsupported_text_file(self, document_dir) -> None:
        (document_dir / "code.docx").write_bytes(b"PK\x03\x04")
        with pytest.raises(ValueError, match="Unsupported text source 'code.docx'"):
            resolve_document_paths(document_dir / "code.docx")


class TestLoading:
    def test_parse_outline_shapes(self) -> None:
        data = [{"number": "A", "title": "Appendix", "entries": [{"code": "A.1.1", "title": "X"}]}]
        assert parse_outline(data)[0].sections[0].code == "A.1.1"
        assert parse_outline({"chapters": data})[0].number == "A"

    def test_load_document(self, document_dir, raw_text) -> None:
        chapters, text = load_document(document_dir)
        assert chapters[0].number == 5
        assert text == raw_text

    def test_text_cache(self, document_dir) -> None:
        cache = DocumentTextCache(capacity=2)
        first = load_document_text(document_dir / "text.txt", cache)
        (document_dir / "text.txt").write_text("changed", encoding="utf-8")
        assert load_document_text(document_dir / "text.txt", cache) is first
        assert load_document_text(document_dir / "text.txt") == "changed"

    def test_unsupported_suffix(self, tmp_path) -> None:
        with pytest.raises(KeyError):
            get_backend_for(tmp_path / "book.docx")
        with pytest.raises(KeyError):
            get_backend("ocr")


class TestPdfBackend:
    def test_pages_are_marked(self, tmp_path) -> None:
        pdf_path = tmp_path / "code.pdf"
        with fitz.open() as doc:
            for text in ("5.2 Loads apply.", "5.3 Combinations apply."):
                page = doc.new_page()
                page.insert_text((72, 72), text)
            doc.save(pdf_path)
        backend = get_backend_for(pdf_path)()
        assert backend.name == "pymupdf"
        text = backend.extract_text(pdf_path)
        assert text.startswith("[Page 1]\n5.2 Loads apply.")
        assert "[Page 2]\n5.3 Combinations apply." in text


class TestCodeDocument:
    def test_facade(self, document_dir) -> None:
        doc = load_code_document(document_dir)
        assert doc.name == "fire2016"
        node = doc.find("5.2")
        span = doc.locate(node)
        assert span.section_text.startswith("5.2 Loads:")
        assert doc.locate(node.key) == span
        assert len(doc.view_cache) == 1
        assert doc.evidence("dead loads")[0].snippet
        assert doc.keyword_snippets("dead loads")
        assert [c.number for c in doc.filter("combinations")] == [5]
        assert not doc.explain(doc.find("5.9")).found


class TestHierarchyConverter:
    def test_parses_window_assignment(self) -> None:
        source = "window.FIRE2016_HIERARCHY = " + json.dumps([{"number": 1, "title": "x", "sections": []}]) + ";\n"
        name, data = parse_hierarchy_js(source)
        assert name == "FIRE2016_HIERARCHY"
        assert slug_for(name) == "fire2016"
        assert data[0]["number"] == 1
