"""Domain models for indexed library documents.

Following Cosmic Python principles:
- Value Objects are immutable (frozen=True)
- No infrastructure dependencies

Document identifiers belong to the library layer. The search core only
needs them to be hashable, comparable with each other, and cheap to copy.
"""

from collections.abc import Hashable
from typing import TypeAlias

from pydantic import BaseModel, ConfigDict, Field, field_validator


DocId: TypeAlias = Hashable


class Doc(BaseModel):
    """Value object holding the searchable fields of a library document.

    Only ``title``, ``authors`` and ``keywords`` are indexed. Any other
    metadata the library keeps is ignored here.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    title: str = ""
    authors: tuple[str, ...] = Field(default_factory=tuple)
    keywords: tuple[str, ...] = Field(default_factory=tuple)

    @field_validator("authors", "keywords", mode="before")
    @classmethod
    def _reject_bare_string(cls, value: object) -> object:
        # A bare string would otherwise be split into single characters
        if isinstance(value, str):
            return (value,)
        return value
