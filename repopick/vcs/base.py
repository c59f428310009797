"""Abstract VCS interface for repopick."""

from abc import ABC, abstractmethod

from repopick.vcs.models import FlatTree, RepoSummary


class VCSProvider(ABC):
    """Read-only queries against a source-hosting platform.

    Implementations raise VCSError for any upstream failure.
    """

    @abstractmethod
    async def list_repos(self) -> list[RepoSummary]:
        """List the authenticated account's own repositories."""
        ...

    @abstractmethod
    async def get_flat_tree(self, repo_id: str) -> FlatTree:
        """Return the full recursive listing of the default branch.

        Args:
            repo_id: Repository identifier in "owner/repo" format.
        """
        ...

    @abstractmethod
    async def get_raw_file(self, repo_id: str, path: str) -> str:
        """Fetch the raw text body of a file.

        Args:
            repo_id: Repository identifier in "owner/repo" format.
            path: File path within the repository.
        """
        ...
