"""GitHub VCS provider using PyGithub."""

from __future__ import annotations

import asyncio
import base64
import logging
import threading
from collections import OrderedDict
from functools import cached_property
from itertools import islice

from github import Auth, Github, GithubException
from github.Repository import Repository

from repopick.tree.models import Entry
from repopick.vcs.base import VCSProvider
from repopick.vcs.models import FlatTree, RepoSummary, VCSError, validate_repo_id

logger = logging.getLogger(__name__)


def _error_message(e: GithubException) -> str:
    data = e.data if isinstance(e.data, dict) else {}
    return str(data.get("message") or e)


def _wrap(operation: str, e: GithubException) -> VCSError:
    return VCSError(operation, f"{operation} failed: {_error_message(e)}", status=e.status, cause=e)


class GitHubProvider(VCSProvider):
    """GitHub implementation of VCSProvider using PyGithub.

    PyGithub is synchronous, so all blocking calls are wrapped
    with asyncio.to_thread() to avoid blocking the event loop.
    """

    def __init__(
        self,
        token: str,
        *,
        repo_type: str = "owner",
        max_repos: int = 100,
        timeout: int = 30,
        repo_cache_size: int = 32,
    ) -> None:
        if not token:
            raise ValueError("GitHub token required.")
        self._token = token
        self.repo_type = repo_type
        self.max_repos = max_repos
        self.timeout = timeout
        self.repo_cache_size = repo_cache_size
        self._repos: OrderedDict[str, Repository] = OrderedDict()
        self._repos_lock = threading.Lock()

    @cached_property
    def _client(self) -> Github:
        auth = Auth.Token(self._token)
        return Github(auth=auth, timeout=self.timeout, per_page=min(self.max_repos, 100))

    def _get_repo(self, repo_id: str, *, refresh: bool = False) -> Repository:
        """Get a PyGithub Repository object by 'owner/repo' identifier.

        Lookups are kept in a small LRU so a batch of file fetches costs one
        repo request; ``refresh`` re-reads it (e.g. a changed default branch).
        """
        validate_repo_id(repo_id)
        with self._repos_lock:
            repo = None if refresh else self._repos.get(repo_id)
        if repo is None:
            repo = self._client.get_repo(repo_id)
        with self._repos_lock:
            self._repos[repo_id] = repo
            self._repos.move_to_end(repo_id)
            while len(self._repos) > self.repo_cache_size:
                self._repos.popitem(last=False)
        return repo

    @staticmethod
    def _build_summary(repo: Repository) -> RepoSummary:
        return RepoSummary(
            id=repo.id,
            name=repo.name,
            full_name=repo.full_name,
            private=repo.private,
            description=repo.description,
            url=repo.html_url,
        )

    async def list_repos(self) -> list[RepoSummary]:
        """List repositories for the authenticated user, most recently updated first."""

        def _sync() -> list[RepoSummary]:
            try:
                repos = self._client.get_user().get_repos(type=self.repo_type, sort="updated")
                return [self._build_summary(r) for r in islice(repos, self.max_repos)]
            except GithubException as e:
                raise _wrap("list repositories", e) from e

        logger.info("fetching repositories for authenticated user (type=%s)", self.repo_type)
        summaries = await asyncio.to_thread(_sync)
        logger.info("found %d repositories", len(summaries))
        return summaries

    async def get_flat_tree(self, repo_id: str) -> FlatTree:
        """Recursive listing of the default branch via the Git Trees API."""

        def _sync() -> FlatTree:
            try:
                repo = self._get_repo(repo_id, refresh=True)
                ref = repo.default_branch
                git_tree = repo.get_git_tree(ref, recursive=True)
            except GithubException as e:
                raise _wrap(f"list tree of {repo_id}", e) from e
            entries = [
                Entry(path=el.path, kind=el.type, id=el.sha) for el in git_tree.tree
            ]
            truncated = bool(git_tree.raw_data.get("truncated", False))
            return FlatTree(entries=entries, truncated=truncated, ref=ref)

        logger.info("fetching tree for %s", repo_id)
        flat = await asyncio.to_thread(_sync)
        if flat.truncated:
            logger.warning("tree listing for %s was truncated upstream", repo_id)
        logger.info("found %d entries in %s@%s", len(flat.entries), repo_id, flat.ref)
        return flat

    async def get_raw_file(self, repo_id: str, path: str) -> str:
        """Fetch a file body, decoded as UTF-8 with replacement characters."""

        def _sync() -> str:
            operation = f"fetch {repo_id}/{path}"
            try:
                repo = self._get_repo(repo_id)
                content = repo.get_contents(path, ref=repo.default_branch)
                if isinstance(content, list):
                    raise VCSError(
                        operation, f"Path '{path}' is a directory, not a file.", status=400
                    )
                if content.encoding == "base64":
                    raw = content.decoded_content
                else:
                    # Contents API does not inline bodies over 1 MB.
                    blob = repo.get_git_blob(content.sha)
                    raw = base64.b64decode(blob.content)
            except GithubException as e:
                raise _wrap(operation, e) from e
            return raw.decode("utf-8", errors="replace")

        logger.info("fetching raw content for %s/%s", repo_id, path)
        text = await asyncio.to_thread(_sync)
        logger.debug("fetched %s (%d chars)", path, len(text))
        return text
