"""Pydantic models for citation records and parse output."""

from typing import Optional

from pydantic import BaseModel, Field


class Citation(BaseModel):
    """Numbered citation record for one resolved marker.

    Values are not constrained here; use records.validate_citation.
    """

    id: int = Field(description="1-based reference number in text order")
    file_id: str = Field(description="Identifier of the cited file")
    quote: str = Field(default="", description="Quoted excerpt")
    original_text: str = Field(description="Marker text that was replaced")
    filename: Optional[str] = Field(default=None, description="Source filename if derivable")
    page_number: Optional[int] = Field(default=None, description="Source page if derivable")

    model_config = {"frozen": True}


class ParsedResponse(BaseModel):
    """Display text with numbered references plus their citation records."""

    text: str = Field(description="Text with markers replaced by [n] tokens")
    citations: list[Citation] = Field(default_factory=list, description="Citations ordered by id")

    model_config = {"frozen": True}


class SourceInfo(BaseModel):
    """Source metadata decoded from a file identifier."""

    filename: Optional[str] = Field(default=None)
    page_number: Optional[int] = Field(default=None)

    model_config = {"frozen": True}


class FormattedCitation(BaseModel):
    """Human-readable rendering of a citation."""

    id: int = Field(description="Citation id")
    display: str = Field(description="Label such as '[1] report.pdf, page 5'")
    quote: str = Field(description="Quoted excerpt")
    source: str = Field(description="Filename if known, else file id")

    model_config = {"frozen": True}
