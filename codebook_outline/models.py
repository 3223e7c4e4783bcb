"""Data models for code outlines, located sections, evidence and answers."""

from dataclasses import dataclass

from pydantic import AliasChoices, BaseModel, Field


class HeadingEntry(BaseModel):
    """One author-supplied heading of a chapter (order-significant)."""

    code: str = Field(default="", description="Section code, e.g. 5.2.3, A.3.1 or Division")
    title: str = Field(default="", description="Heading title as written in the outline")


class Chapter(BaseModel):
    """A chapter of a code document with its flat, ordered heading list."""

    number: int | str = Field(description="Chapter number as printed (int or string)")
    title: str = Field(default="", description="Chapter title")
    sections: list[HeadingEntry] = Field(
        default_factory=list,
        validation_alias=AliasChoices("sections", "entries"),
        description="Flat heading entries in document order",
    )

    @property
    def label(self) -> str:
        return f"Chapter {self.number} {self.title}".strip()


class OutlineNode(BaseModel):
    """Node of the outline tree derived from a chapter's heading list."""

    key: str = Field(description="Stable key derived from position: <chapter_key>-node-<index>")
    code: str = Field(default="")
    title: str = Field(default="")
    level: int = Field(ge=1, description="Nesting level inferred from the code (>= 1)")
    children: list["OutlineNode"] = Field(default_factory=list)
    parent_key: str | None = Field(default=None, description="Key of the parent node; None for roots")
    chapter_number: int | str | None = Field(default=None)
    chapter_title: str = Field(default="")

    @property
    def label(self) -> str:
        return f"{self.code} {self.title}".strip() if self.code else self.title


class ChapterOutline(BaseModel):
    """A chapter together with its outline tree."""

    key: str = Field(description="Chapter key, e.g. chapter-0")
    number: int | str
    title: str = ""
    nodes: list[OutlineNode] = Field(default_factory=list, description="Root nodes of the chapter tree")

    @property
    def label(self) -> str:
        return f"Chapter {self.number} {self.title}".strip()


@dataclass(frozen=True)
class NormalizedView:
    """
    Lowercased, whitespace-collapsed view of a raw text with offsets back into it.
    index_map[i] is the raw offset of normalized[i]; len(index_map) == len(normalized).
    """

    source: str
    normalized: str
    index_map: tuple[int, ...]


class SectionSpan(BaseModel):
    """Verbatim slice of the raw text belonging to one outline node."""

    section_text: str = Field(description="Trimmed raw text of the section")
    matched_heading: str = Field(description="Normalized heading candidate that matched")
    start_offset: int = Field(description="Raw offset where the slice starts (before trimming)")
    end_offset: int = Field(description="Raw offset where the slice ends, exclusive (before trimming)")
    truncated: bool = Field(
        default=False,
        description="True when no end boundary was found and the span was capped",
    )


class EvidenceCandidate(BaseModel):
    """A raw-text snippet relevant to a question, with the nearest section reference."""

    section: str = Field(default="", description="Nearest section reference, empty if none")
    snippet: str = Field(description="Whitespace-collapsed slice of the raw text")


class SearchTarget(BaseModel):
    """Best match of a navigation query across a corpus of documents."""

    score: int
    document: str = Field(description="Document name")
    chapter_number: int | str | None = None
    section_code: str = ""
    section_title: str = ""
    term: str = Field(default="", description="The query as typed (trimmed)")
    exact_match: bool = False

    @property
    def notice(self) -> str:
        if self.exact_match:
            return ""
        return f'No exact match for "{self.term}". Showing the closest result.'


class Citation(BaseModel):
    code_name: str = Field(default="", validation_alias=AliasChoices("codeName", "code_name"))
    chapter: str = ""
    section: str = ""
    evidence: str = ""


class AnswerPoint(BaseModel):
    statement: str = ""
    citations: list[Citation] = Field(default_factory=list)


class SuggestedCode(BaseModel):
    code_name: str = Field(default="", validation_alias=AliasChoices("codeName", "code_name"))
    why: str = ""


class QAAnswer(BaseModel):
    """Answer to a question over the selected code documents."""

    addressed: bool = Field(
        default=False,
        validation_alias=AliasChoices("addressedInSelectedCodes", "addressed"),
        description="Whether the selected documents address the question",
    )
    direct_answer: str = Field(default="", validation_alias=AliasChoices("directAnswer", "direct_answer"))
    points: list[AnswerPoint] = Field(default_factory=list)
    assumptions: list[str] = Field(default_factory=list)
    check_in_pdf: list[str] = Field(
        default_factory=list, validation_alias=AliasChoices("checkInPdf", "check_in_pdf")
    )
    suggested_codes: list[SuggestedCode] = Field(
        default_factory=list,
        validation_alias=AliasChoices("suggestedCodesIfNotAddressed", "suggested_codes"),
    )


class SectionExplanation(BaseModel):
    """Section text plus a summary for display next to the outline."""

    found: bool = Field(description="False when the section heading was not located in the text")
    section_text: str = ""
    summary_text: str = ""
    matched_heading: str = ""
    truncated: bool = False
