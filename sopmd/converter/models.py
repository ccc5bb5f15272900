from __future__ import annotations

from typing import Optional, Union
from pydantic import BaseModel, ConfigDict, Field


class Word(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    left: float
    right: float
    y: float = 0.0  # vertical center, PDF user space (larger is higher on the page)


class Line(BaseModel):
    model_config = ConfigDict(frozen=True)

    y: float
    words: tuple[Word, ...] = ()
    text: str = ""

    @classmethod
    def from_words(cls, y: float, words) -> "Line":
        ws = tuple(sorted(words, key=lambda w: w.left))
        return cls(y=y, words=ws, text=" ".join(w.text for w in ws))


class Page(BaseModel):
    number: int
    height: float = 0.0
    lines: list[Line] = Field(default_factory=list)


class HeaderMetadata(BaseModel):
    doc: Optional[str] = None   # Document No.
    eff: Optional[str] = None   # Effective Date
    rev: Optional[str] = None   # Revision
    org: Optional[str] = None   # Accountable Organization
    appr: Optional[str] = None  # Management Approval
    src: Optional[str] = None   # Source

    def as_dict(self) -> dict[str, str]:
        return {k: v for k, v in self.model_dump().items() if v}


class HeaderParseResult(BaseModel):
    metadata: HeaderMetadata = Field(default_factory=HeaderMetadata)
    # Lower-cased line texts to drop from the first page's body.
    excluded_lines: frozenset[str] = frozenset()
    title: Optional[str] = None

    def excludes(self, text: str) -> bool:
        return (text or "").strip().lower() in self.excluded_lines


class HeadingBlock(BaseModel):
    level: int = Field(ge=1, le=6)
    text: str


class ParagraphBlock(BaseModel):
    text: str


class TableBlock(BaseModel):
    rows: list[list[str]]


Block = Union[HeadingBlock, ParagraphBlock, TableBlock]
