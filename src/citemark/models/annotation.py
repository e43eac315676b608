"""Pydantic models for upstream annotation metadata."""

from typing import Any, Literal, Union

from pydantic import BaseModel, Field, field_validator

FILE_CITATION = "file_citation"


class FileCitation(BaseModel):
    """Reference payload carried by a file citation annotation."""

    file_id: str = Field(description="Identifier of the cited file")
    quote: str = Field(default="", description="Quoted excerpt, empty if omitted upstream")

    model_config = {"frozen": True}

    @field_validator("quote", mode="before")
    @classmethod
    def _null_quote_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class FileCitationAnnotation(BaseModel):
    """Annotation pointing at one citation marker in generated text.

    Offsets are claimed by the generation service and are not trusted:
    the normalizer checks them against the actual text.
    """

    type: Literal["file_citation"] = Field(default=FILE_CITATION, description="Kind tag")
    text: str = Field(description="Literal marker text, e.g. '【4:0†source】'")
    start_index: int = Field(description="Claimed start offset (inclusive)")
    end_index: int = Field(description="Claimed end offset (exclusive)")
    file_citation: FileCitation = Field(description="Reference payload")

    model_config = {"frozen": True}


class OtherAnnotation(BaseModel):
    """Annotation of any kind other than file_citation.

    Carries no payload; discarded before resolution.
    """

    type: str = Field(description="Kind tag reported upstream")

    model_config = {"frozen": True, "extra": "ignore"}


Annotation = Union[FileCitationAnnotation, OtherAnnotation]
