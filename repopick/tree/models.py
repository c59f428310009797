"""Pydantic models for flat listing entries and the nested tree."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

# Upstream vocabularies (Git Trees API, contents API) mapped onto our two kinds.
_KIND_ALIASES: dict[str, str] = {
    "directory": "dir",
    "tree": "dir",
    "blob": "file",
    "commit": "file",
}


class EntryKind(str, Enum):
    FILE = "file"
    DIR = "dir"


class Entry(BaseModel):
    """One flat record from a recursive repository listing."""

    path: str = Field(min_length=1, description="Slash-delimited path relative to repo root")
    kind: EntryKind
    id: str = ""

    @field_validator("kind", mode="before")
    @classmethod
    def normalize_kind(cls, v: Any) -> Any:
        if isinstance(v, str):
            return _KIND_ALIASES.get(v, v)
        return v

    @field_validator("path")
    @classmethod
    def strip_slashes(cls, v: str) -> str:
        v = v.strip("/")
        if not v:
            raise ValueError("path cannot be empty or only slashes")
        return v

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIR


class Node(BaseModel):
    """One element of the reconstructed hierarchy.

    ``children`` is None for files and a list (possibly empty) for directories.
    """

    name: str
    path: str
    kind: EntryKind
    id: str = ""
    children: list[Node] | None = None

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIR

    def to_dict(self) -> dict[str, Any]:
        """JSON shape for the UI; ``children`` is omitted on files."""
        data: dict[str, Any] = {
            "name": self.name,
            "path": self.path,
            "type": self.kind.value,
            "id": self.id,
        }
        if self.children is not None:
            data["children"] = [c.to_dict() for c in self.children]
        return data
