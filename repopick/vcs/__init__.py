"""VCS providers for repopick."""

import os

from repopick.config.models import VCSConfig
from repopick.vcs.base import VCSProvider
from repopick.vcs.github import GitHubProvider
from repopick.vcs.models import FlatTree, RepoSummary, VCSError, validate_repo_id


def create_provider(config: VCSConfig) -> VCSProvider:
    """Create a VCS provider from config.

    Resolves the token from the environment variable named in config.token_env.
    """
    if config.provider != "github":
        raise ValueError(
            f"Unsupported VCS provider: {config.provider!r}. "
            "Currently only 'github' is supported."
        )
    token = os.environ.get(config.token_env, "")
    if not token:
        raise ValueError(
            f"VCS token not found. Set the {config.token_env} environment variable "
            f"(or add {config.token_env}=<token> to a .env file in the working directory)."
        )
    return GitHubProvider(
        token=token,
        repo_type=config.repo_type,
        max_repos=config.max_repos,
        timeout=config.timeout,
    )


__all__ = [
    "FlatTree",
    "GitHubProvider",
    "RepoSummary",
    "VCSError",
    "VCSProvider",
    "create_provider",
    "validate_repo_id",
]
