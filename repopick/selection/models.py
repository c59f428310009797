"""Pydantic models for combined documents and aggregation progress."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class EmptySelectionError(ValueError):
    """Raised when aggregation is requested with no selected paths."""

    def __init__(self, message: str = "Please select at least one file from the tree.") -> None:
        super().__init__(message)


class Section(BaseModel):
    """One file's contribution to a combined document."""

    path: str
    status: Literal["ok", "error"]
    body: str = ""
    detail: str = ""
    http_status: int | None = Field(
        default=None, description="Upstream status for rejected fetches; None for network errors"
    )

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    def render(self) -> str:
        if self.ok:
            return (
                f"Path: {self.path}\n"
                f"--- Start of file: {self.path} ---\n"
                f"{self.body}"
                f"\n--- End of file: {self.path} ---\n\n"
            )
        if self.http_status is not None:
            return (
                f"Error fetching file: {self.path}\n"
                f"Status: {self.http_status}\n"
                f"{self.detail}\n\n"
            )
        return f"Network error fetching file: {self.path}\n{self.detail}\n\n"


class CombinedDocument(BaseModel):
    """Ordered result of one aggregation run. Never persisted."""

    repository: str
    paths: list[str]
    sections: list[Section] = Field(default_factory=list)
    include_header: bool = True

    @property
    def ok_count(self) -> int:
        return sum(1 for s in self.sections if s.ok)

    @property
    def error_count(self) -> int:
        return len(self.sections) - self.ok_count

    def header(self) -> str:
        lines = [
            f"Repository: {self.repository}\n\n",
            f"Selected files for inclusion ({len(self.paths)} total):\n",
        ]
        lines.extend(f"- {p}\n" for p in self.paths)
        lines.append("\n---\n\n")
        return "".join(lines)

    @property
    def text(self) -> str:
        head = self.header() if self.include_header else ""
        return (head + "".join(s.render() for s in self.sections)).strip()


class ProgressEvent(BaseModel):
    """Emitted before (``fetching``) and after (``done``/``error``) each fetch."""

    kind: Literal["fetching", "done", "error"]
    path: str
    index: int
    total: int

    def describe(self) -> str:
        if self.kind == "fetching":
            return f"Fetching ({self.index}/{self.total}): {self.path}..."
        if self.kind == "done":
            return f"Done: {self.path}"
        return f"Error fetching {self.path}!"
