"""Pydantic models and errors for VCS data."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from repopick.tree.models import Entry


class VCSError(Exception):
    """Wraps provider-specific exceptions with the failing operation and HTTP status."""

    def __init__(
        self, operation: str, message: str, status: int | None = None, cause: Exception | None = None
    ) -> None:
        self.operation = operation
        self.status = status
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause


class RepoSummary(BaseModel):
    """Repository as shown in the picker list."""

    id: int
    name: str
    full_name: str = Field(description="Full name including owner (e.g. owner/repo)")
    private: bool = False
    description: str | None = None
    url: str = ""

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, v: str) -> str:
        validate_repo_id(v)
        return v

    @property
    def owner(self) -> str:
        return self.full_name.split("/")[0]


class FlatTree(BaseModel):
    """Recursive flat listing of a repository's default branch."""

    entries: list[Entry] = Field(default_factory=list)
    truncated: bool = Field(
        default=False, description="Upstream capped the listing; the tree is incomplete"
    )
    ref: str = ""


def validate_repo_id(repo_id: str) -> tuple[str, str]:
    """Validate and split a repo identifier into (owner, repo_name).

    Raises ValueError if format is invalid.
    """
    parts = repo_id.split("/")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise ValueError(f"Invalid repo identifier '{repo_id}': expected 'owner/repo'")
    return parts[0], parts[1]
