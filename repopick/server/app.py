"""Thin Flask proxy: holds the credential, forwards read-only queries, builds trees."""

from __future__ import annotations

import asyncio
import json
import logging
import queue
import threading
from collections.abc import Iterator
from pathlib import Path

from flask import Flask, Response, jsonify, request, send_from_directory

from repopick.config.models import RepopickConfig
from repopick.selection import (
    CombinedDocument,
    EmptySelectionError,
    FetchBody,
    ProgressEvent,
    aggregate,
)
from repopick.tree import build_tree, count_nodes
from repopick.vcs.base import VCSProvider
from repopick.vcs.models import VCSError, validate_repo_id

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"

API_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


def _error(message: str, status: int, details: str | None = None):
    body = {"error": message}
    if details is not None:
        body["details"] = details
    return jsonify(body), status


def _upstream_error(message: str, e: Exception):
    """Map a provider failure onto an HTTP response."""
    if isinstance(e, VCSError) and e.status:
        if e.status == 404:
            message = "Not found at the specified path."
        return _error(message, e.status, str(e))
    logger.error("%s: %s", message, e, exc_info=True)
    return _error("An unexpected error occurred", 500, str(e))


def _repo_params(*extra: str) -> tuple[dict[str, str], str | None]:
    """Read owner, repo and any ``extra`` query parameters.

    Returns the values plus a client-facing problem message, or None.
    """
    names = ("owner", "repo", *extra)
    values = {name: request.args.get(name, "").strip() for name in names}
    missing = [name for name, value in values.items() if not value]
    if missing:
        return values, f"{', '.join(missing)} query parameter(s) are required."
    try:
        validate_repo_id(f"{values['owner']}/{values['repo']}")
    except ValueError as e:
        return values, str(e)
    return values, None


def _document_payload(doc: CombinedDocument) -> dict:
    return {
        "repository": doc.repository,
        "text": doc.text,
        "ok_count": doc.ok_count,
        "error_count": doc.error_count,
        "sections": [
            s.model_dump(include={"path", "status", "http_status", "detail"})
            for s in doc.sections
        ],
    }


def _stream_combine(
    repo_id: str, paths: list[str], fetch_body: FetchBody, include_header: bool
) -> Iterator[str]:
    """Run the aggregation on a worker thread, yielding NDJSON lines as it goes.

    One ``progress`` line per ProgressEvent, then a single ``result`` line
    (or ``error`` line if the batch itself blew up).
    """
    lines: queue.Queue[str | None] = queue.Queue()

    def _emit(payload: dict) -> None:
        lines.put(json.dumps(payload) + "\n")

    def _on_progress(event: ProgressEvent) -> None:
        _emit({"event": "progress", **event.model_dump(), "message": event.describe()})

    def _run() -> None:
        try:
            doc = asyncio.run(
                aggregate(repo_id, paths, fetch_body, _on_progress, include_header=include_header)
            )
            _emit({"event": "result", **_document_payload(doc)})
        except Exception as e:
            logger.error("combining %s failed: %s", repo_id, e, exc_info=True)
            _emit({"event": "error", "error": "An unexpected error occurred", "details": str(e)})
        finally:
            lines.put(None)

    threading.Thread(target=_run, name=f"combine-{repo_id}", daemon=True).start()
    while True:
        line = lines.get()
        if line is None:
            return
        yield line


def create_app(config: RepopickConfig, provider: VCSProvider) -> Flask:
    """Build the Flask app around one config object and one provider."""
    app = Flask(__name__, static_folder=None)
    app.config["REPOPICK"] = config

    @app.get("/api/github/repos")
    async def list_repos():
        try:
            repos = await provider.list_repos()
        except Exception as e:
            return _upstream_error("Failed to fetch repositories from GitHub", e)
        return jsonify([r.model_dump() for r in repos])

    @app.get("/api/github/tree")
    async def repo_tree():
        params, problem = _repo_params()
        if problem:
            return _error(problem, 400)
        repo_id = f"{params['owner']}/{params['repo']}"
        try:
            flat = await provider.get_flat_tree(repo_id)
        except Exception as e:
            return _upstream_error("Failed to fetch repository tree from GitHub", e)

        root = build_tree(flat.entries, root_name=params["repo"])
        dirs, files = count_nodes(root)
        return jsonify(
            {
                "repository": repo_id,
                "ref": flat.ref,
                "truncated": flat.truncated,
                "counts": {"directories": dirs, "files": files},
                "tree": root.to_dict(),
            }
        )

    @app.get("/api/github/file-raw")
    async def file_raw():
        params, problem = _repo_params("path")
        if problem:
            return _error(problem, 400)
        repo_id = f"{params['owner']}/{params['repo']}"
        try:
            text = await provider.get_raw_file(repo_id, params["path"])
        except Exception as e:
            return _upstream_error("Failed to fetch raw file content from GitHub", e)
        return Response(text, mimetype="text/plain")

    @app.post("/api/combine")
    def combine():
        data = request.get_json(silent=True) or {}
        owner = str(data.get("owner") or "").strip()
        repo = str(data.get("repo") or "").strip()
        paths = data.get("paths", [])
        if not owner or not repo:
            return _error("owner and repo are required.", 400)
        repo_id = f"{owner}/{repo}"
        try:
            validate_repo_id(repo_id)
        except ValueError as e:
            return _error(str(e), 400)
        if not isinstance(paths, list) or not all(isinstance(p, str) for p in paths):
            return _error("paths must be a list of strings.", 400)
        if not paths:
            return _error(str(EmptySelectionError()), 400)

        async def fetch_body(path: str) -> str:
            return await provider.get_raw_file(repo_id, path)

        return Response(
            _stream_combine(repo_id, paths, fetch_body, config.output.include_header),
            mimetype="application/x-ndjson",
        )

    @app.route("/api/", defaults={"rest": ""}, methods=API_METHODS)
    @app.route("/api/<path:rest>", methods=API_METHODS)
    def unknown_api(rest: str):
        return _error(f"Unknown API endpoint: /api/{rest}", 404)

    @app.get("/", defaults={"rest": ""})
    @app.get("/<path:rest>")
    def spa(rest: str):
        if rest and (STATIC_DIR / rest).is_file():
            return send_from_directory(STATIC_DIR, rest)
        return send_from_directory(STATIC_DIR, "index.html")

    return app
