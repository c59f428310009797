"""HTTP proxy and single-page UI."""

from repopick.server.app import create_app

__all__ = ["create_app"]
