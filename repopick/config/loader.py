"""YAML config loading with env var expansion."""

import os
import re
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from .models import RepopickConfig


def load_config(cli_path: str | None = None) -> RepopickConfig:
    """Load config with resolution order: CLI > project-local > user-global > defaults.

    A ``.env`` file in the working directory is loaded first; it never
    overrides variables already present in the environment.
    """
    load_dotenv(Path.cwd() / ".env", override=False)

    config_paths = [
        Path(cli_path) if cli_path else None,
        Path("./repopick.yaml"),
        Path.home() / ".repopick" / "config.yaml",
    ]

    if cli_path and not Path(cli_path).exists():
        raise ValueError(f"Config file not found: {cli_path}")

    config = RepopickConfig()
    for path in config_paths:
        if path and path.exists():
            try:
                with open(path) as f:
                    raw = yaml.safe_load(f)
                if raw is None:
                    continue
                raw = _expand_env_vars(raw)
                config = RepopickConfig(**raw)
                break
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {path}: {e}") from e
            except (TypeError, ValidationError) as e:
                raise ValueError(f"Invalid config in {path}: {e}") from e

    return _apply_env_overrides(config)


def _apply_env_overrides(config: RepopickConfig) -> RepopickConfig:
    """PORT overrides server.port, matching common hosting conventions."""
    port = os.environ.get("PORT")
    if port:
        try:
            config.server.port = int(port)
        except ValueError as e:
            raise ValueError(f"Invalid PORT environment variable: {port!r}") from e
    return config


def _expand_env_vars(obj: object) -> object:
    """Recursively expand ${VAR} references in strings."""
    if isinstance(obj, str):
        return re.sub(r"\$\{(\w+)\}", lambda m: os.environ.get(m.group(1), ""), obj)
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


# Default YAML template for `repopick config init`
DEFAULT_CONFIG_TEMPLATE = """\
# repopick.yaml

# VCS Provider
vcs:
  provider: "github"
  token_env: "GITHUB_PERSONAL_ACCESS_TOKEN"   # name of the env var holding the token
  repo_type: "owner"           # all | owner | public | private | member
  max_repos: 100
  timeout: 30                  # seconds per upstream request

# Local web UI
server:
  host: "127.0.0.1"
  port: 8085                   # PORT env var overrides this
  debug: false

# Combined document
output:
  include_header: true         # repository + selected file list before the bodies

# Logging
log_level: "info"              # debug | info | warn | error
log_format: "text"             # text | json
"""
