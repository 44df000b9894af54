"""The workshop web application: pages, the flashcard API, patterns and static files."""

from __future__ import annotations

import argparse
import contextlib
import html
import mimetypes
import os
import sqlite3
from http import HTTPStatus
from pathlib import Path, PurePosixPath
from typing import Callable
from urllib.parse import quote

from werkzeug.exceptions import BadRequest, HTTPException, NotFound
from werkzeug.security import safe_join
from werkzeug.serving import run_simple
from werkzeug.wrappers import Request, Response

from workshop import components, db, handlers
from workshop.handlers import _error_response, _json_response

PATTERNS_PREFIX = "/api/gol/patterns/"
STATIC_PREFIX = "/static/"

Handler = Callable[[Request], Response]


def list_pattern_files(patterns_dir: str | os.PathLike) -> list[str]:
    """Names of the files (not directories) in the patterns directory, sorted."""
    with os.scandir(patterns_dir) as entries:
        return sorted(entry.name for entry in entries if not entry.is_dir(follow_symlinks=False))


def get_file_contents(patterns_dir: str | os.PathLike, path: str) -> dict[str, str]:
    """Read the pattern named by a request path.

    Raises BadRequest when no file is named and NotFound when it does not exist.
    """
    file_name = path[len(PATTERNS_PREFIX):] if path.startswith(PATTERNS_PREFIX) else path
    if not file_name:
        raise BadRequest("No file name provided")
    target = safe_join(os.fspath(patterns_dir), file_name)
    if target is None or not os.path.exists(target):
        raise NotFound("File does not exist")
    contents = Path(target).read_bytes()
    return {"filename": file_name, "contents": contents.decode("utf-8", errors="replace")}


def _html_response(markup: str) -> Response:
    return Response(markup, content_type="text/html; charset=utf-8")


def _redirect(location: str, request: Request) -> Response:
    if request.query_string:
        location += "?" + request.query_string.decode("latin-1")
    return Response(status=HTTPStatus.MOVED_PERMANENTLY, headers={"Location": location})


def _guess_type(path: Path, data: bytes) -> str:
    guessed, _ = mimetypes.guess_type(path.name)
    if guessed:
        return f"{guessed}; charset=utf-8" if guessed.startswith("text/") else guessed
    try:
        data.decode("utf-8")
    except UnicodeDecodeError:
        return "application/octet-stream"
    return "text/plain; charset=utf-8"


def _file_response(path: Path, content_type: str | None) -> Response:
    data = path.read_bytes()
    return Response(data, content_type=content_type or _guess_type(path, data))


def _listing_response(directory: Path) -> Response:
    names = sorted(
        entry.name + ("/" if entry.is_dir() else "") for entry in os.scandir(directory)
    )
    lines = "".join(
        f'<a href="{html.escape(quote(name), quote=True)}">{html.escape(name)}</a>\n'
        for name in names
    )
    page = (
        "<!doctype html>\n"
        '<meta name="viewport" content="width=device-width">\n'
        f"<pre>\n{lines}</pre>\n"
    )
    return _html_response(page)


def _serve_static(
    root: Path, url_path: str, request: Request, content_type: str | None = None
) -> Response:
    """Serve a file or directory under ``root`` addressed by ``url_path``."""
    if not url_path.startswith("/"):
        url_path = "/" + url_path
    relative = url_path.strip("/")
    target_name = safe_join(os.fspath(root), relative) if relative else os.fspath(root)
    if target_name is None or not os.path.exists(target_name):
        return _error_response("404 page not found", HTTPStatus.NOT_FOUND)
    target = Path(target_name)
    name = PurePosixPath(url_path).name

    if target.is_dir():
        if not url_path.endswith("/"):
            return _redirect(name + "/", request)
        index = target / "index.html"
        if index.is_file():
            return _file_response(index, content_type)
        return _listing_response(target)

    if url_path.endswith("/"):
        return _redirect("../" + name, request)
    return _file_response(target, content_type)


def create_app(conn: sqlite3.Connection, static_dir: str | os.PathLike):
    """Build the WSGI application serving pages, the API and static files."""
    static_root = Path(static_dir)
    patterns_dir = static_root / "patterns"

    def pattern_list(request: Request) -> Response:
        try:
            names = list_pattern_files(patterns_dir)
        except OSError as exc:
            return _error_response(str(exc), HTTPStatus.INTERNAL_SERVER_ERROR)
        return _json_response(names or None)

    def pattern_contents(request: Request) -> Response:
        try:
            result = get_file_contents(patterns_dir, request.path)
        except HTTPException as exc:
            return _error_response(exc.description or "", exc.code or HTTPStatus.BAD_REQUEST)
        except OSError as exc:
            return _error_response(str(exc), HTTPStatus.INTERNAL_SERVER_ERROR)
        return _json_response(result)

    def root_files(request: Request) -> Response:
        return _serve_static(static_root, request.path, request)

    def static_files(request: Request) -> Response:
        content_type = "application/javascript" if request.path.endswith(".js") else None
        return _serve_static(
            static_root, request.path[len(STATIC_PREFIX):], request, content_type
        )

    exact: dict[str, Handler] = {
        "/projects/gol": lambda request: _html_response(components.gol_page()),
        "/home": lambda request: _html_response(components.home()),
        "/api/flashcard": handlers.random_flashcard_handler(conn),
        "/api/flashcard/rate": handlers.rate_flashcard_handler(conn),
        "/api/flashcard/decks": handlers.get_decks_handler(conn),
        "/api/flashcard/cards": handlers.card_handler(conn),
        "/api/gol/patterns": pattern_list,
    }
    subtrees: dict[str, Handler] = {
        "/api/flashcard/cards/": handlers.get_cards_for_deck_handler(conn),
        "/api/flashcard/decks/": handlers.deck_handler(conn),
        PATTERNS_PREFIX: pattern_contents,
        STATIC_PREFIX: static_files,
        "/": root_files,
    }

    def route(path: str) -> Handler:
        if path in exact:
            return exact[path]
        prefix = max((p for p in subtrees if path.startswith(p)), key=len, default="/")
        return subtrees[prefix]

    @Request.application
    def application(request: Request) -> Response:
        return route(request.path)(request)

    return application


def main(argv: list[str] | None = None) -> int:
    """Open the database, make sure the tables exist and serve the site."""
    parser = argparse.ArgumentParser(prog="workshop", description="Serve the workshop site.")
    parser.add_argument("--database", default=db.DEFAULT_DATABASE, help="SQLite database file")
    parser.add_argument("--static", default="static", help="directory of static files")
    parser.add_argument("--host", default="0.0.0.0", help="address to listen on")
    parser.add_argument("--port", type=int, default=8080, help="port to listen on")
    args = parser.parse_args(argv)

    conn = db.connect_to_db(args.database)
    try:
        with contextlib.suppress(sqlite3.Error):
            db.create_all_tables(conn, db.CURRENT_TABLES)
        run_simple(args.host, args.port, create_app(conn, args.static))
    finally:
        conn.close()
    return 0