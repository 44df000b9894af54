"""HTTP handlers for the flashcard API, each built around a database connection."""

from __future__ import annotations

import json
import logging
import re
import sqlite3
import time
from dataclasses import asdict
from http import HTTPStatus
from typing import Any, Callable

from werkzeug.wrappers import Request, Response

from workshop import db

Handler = Callable[[Request], Response]

logger = logging.getLogger(__name__)

_INTEGER = re.compile(r"[+-]?[0-9]+")

_JSON_ESCAPES = str.maketrans(
    {
        "<": "\\u003c",
        ">": "\\u003e",
        "&": "\\u0026",
        "\u2028": "\\u2028",
        "\u2029": "\\u2029",
    }
)

_CARD_FIELDS: dict[str, type] = {
    "id": int,
    "front": str,
    "back": str,
    "reviewed": int,
    "difficulty": int,
}


class _InvalidBody(ValueError):
    """The request body is not the JSON object that was expected."""


def _error_response(message: str, status: int) -> Response:
    """A plain-text error reply."""
    return Response(
        message + "\n",
        status=status,
        content_type="text/plain; charset=utf-8",
        headers={"X-Content-Type-Options": "nosniff"},
    )


def _json_response(payload: Any, status: int = HTTPStatus.OK) -> Response:
    """A JSON reply terminated by a newline, with HTML-sensitive characters escaped."""
    text = json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
    return Response(
        text.translate(_JSON_ESCAPES) + "\n",
        status=status,
        content_type="application/json",
    )


def _atoi(text: str) -> int:
    """Parse a decimal integer with an optional sign and nothing else."""
    if not _INTEGER.fullmatch(text):
        raise ValueError(f"invalid integer: {text!r}")
    return int(text)


def _segment(text: str, index: int) -> str:
    """The slash-separated segment at ``index``, or an empty string if there is none."""
    parts = text.split("/")
    return parts[index] if index < len(parts) else ""


def _matches(value: Any, kind: type) -> bool:
    if kind is int:
        return isinstance(value, int) and not isinstance(value, bool)
    return isinstance(value, kind)


def _decode_object(request: Request, fields: dict[str, type]) -> dict[str, Any]:
    """Read the body as a JSON object holding the given fields.

    Unknown keys are ignored, keys match field names regardless of case,
    missing or null fields keep their zero value.
    """
    try:
        payload = json.loads(request.get_data(as_text=True))
    except ValueError as exc:
        raise _InvalidBody(str(exc)) from exc

    values = {name: kind() for name, kind in fields.items()}
    if payload is None:
        return values
    if not isinstance(payload, dict):
        raise _InvalidBody("expected a JSON object")

    lowered = {name.lower(): name for name in fields}
    for key, value in payload.items():
        name = key if key in fields else lowered.get(key.lower())
        if name is None or value is None:
            continue
        if not _matches(value, fields[name]):
            raise _InvalidBody(f"field {name!r} has the wrong type")
        values[name] = value
    return values


def _form_value(request: Request, name: str) -> str:
    """First value of a form field, taken from the body before the query string."""
    if name in request.form:
        return request.form[name]
    return request.args.get(name, "")


def random_flashcard_handler(conn: sqlite3.Connection) -> Handler:
    """GET: reply with one card picked at random from all decks."""

    def handle(request: Request) -> Response:
        if request.method != "GET":
            return _error_response("Method not allowed", HTTPStatus.METHOD_NOT_ALLOWED)
        try:
            card = db.get_random_card(conn)
        except sqlite3.Error:
            return _error_response("Error fetching card", HTTPStatus.INTERNAL_SERVER_ERROR)
        return _json_response(asdict(card))

    return handle


def get_cards_for_deck_handler(conn: sqlite3.Connection) -> Handler:
    """GET /api/flashcard/cards/<deck id>: reply with the cards of one deck."""

    def handle(request: Request) -> Response:
        if request.method != "GET":
            return _error_response("Method not allowed", HTTPStatus.METHOD_NOT_ALLOWED)
        try:
            deck_id = _atoi(_segment(request.path, 4))
        except ValueError:
            return _error_response("Invalid deck ID", HTTPStatus.BAD_REQUEST)
        try:
            cards = db.get_cards_from_deck(conn, deck_id)
        except sqlite3.Error:
            return _error_response("Error fetching cards", HTTPStatus.INTERNAL_SERVER_ERROR)
        return _json_response([asdict(card) for card in cards])

    return handle


def get_decks_handler(conn: sqlite3.Connection) -> Handler:
    """GET: reply with every deck."""

    def handle(request: Request) -> Response:
        if request.method != "GET":
            return _error_response("Method not allowed", HTTPStatus.METHOD_NOT_ALLOWED)
        try:
            decks = db.get_decks_data(conn)
        except sqlite3.Error:
            return _error_response("Error fetching decks", HTTPStatus.INTERNAL_SERVER_ERROR)
        return _json_response([asdict(deck) for deck in decks])

    return handle


def rate_flashcard_handler(conn: sqlite3.Connection) -> Handler:
    """POST with form fields ID and Rating: validate and report the rating."""

    def handle(request: Request) -> Response:
        if request.method != "POST":
            return _error_response("Method not allowed", HTTPStatus.METHOD_NOT_ALLOWED)
        try:
            card_id = _atoi(_form_value(request, "ID"))
        except ValueError:
            return _error_response("Invalid ID", HTTPStatus.BAD_REQUEST)
        try:
            rating = _atoi(_form_value(request, "Rating"))
        except ValueError:
            return _error_response("Invalid Rating", HTTPStatus.BAD_REQUEST)
        print(f"ID: {card_id}, Rating: {rating}")
        return Response(status=HTTPStatus.OK)

    return handle


def deck_handler(conn: sqlite3.Connection) -> Handler:
    """POST creates a deck from {"name": ...}; DELETE /api/flashcard/decks/<id> removes one."""

    def create(request: Request) -> Response:
        try:
            body = _decode_object(request, {"name": str})
        except _InvalidBody:
            return _error_response("Invalid request body", HTTPStatus.BAD_REQUEST)
        name = body["name"]
        if not name:
            return _error_response("Deck name cannot be empty", HTTPStatus.BAD_REQUEST)
        try:
            db.insert_deck(conn, name)
        except sqlite3.Error:
            return _error_response("Error creating deck", HTTPStatus.INTERNAL_SERVER_ERROR)
        return _json_response({"DeckName": name})

    def delete(request: Request) -> Response:
        try:
            deck_id = _atoi(_segment(request.path, 4))
        except ValueError:
            return _error_response("Invalid deck ID", HTTPStatus.BAD_REQUEST)
        try:
            db.delete_deck_by_id(conn, deck_id)
        except sqlite3.Error:
            return _error_response("Error deleting deck", HTTPStatus.INTERNAL_SERVER_ERROR)
        return Response(status=HTTPStatus.NO_CONTENT)

    def handle(request: Request) -> Response:
        if request.method == "POST":
            return create(request)
        if request.method == "DELETE":
            return delete(request)
        return Response(status=HTTPStatus.OK)

    return handle


def card_handler(conn: sqlite3.Connection) -> Handler:
    """POST adds a card to the deck named by the Referer, DELETE removes one, PUT updates one."""

    def create(request: Request) -> Response:
        try:
            body = _decode_object(request, {"front": str, "back": str})
        except _InvalidBody as exc:
            print(f"Error decoding request body: {exc}")
            return _error_response("Invalid request body", HTTPStatus.CONFLICT)
        if not body["front"] or not body["back"]:
            print("Front and back content cannot be empty")
            return _error_response(
                "Front and back content cannot be empty", HTTPStatus.BAD_REQUEST
            )

        reviewed = time.time_ns() % 1_000_000_000
        try:
            new_card = db.create_card(0, body["front"], body["back"], reviewed, 0)
        except ValueError:
            return _error_response("Error creating card", HTTPStatus.INTERNAL_SERVER_ERROR)
        try:
            inserted_ids = db.insert_cards(conn, [new_card])
        except sqlite3.Error:
            return _error_response("Error inserting card", HTTPStatus.INTERNAL_SERVER_ERROR)

        try:
            deck_id = _atoi(_segment(request.headers.get("Referer", ""), 6))
        except ValueError:
            return _error_response("Invalid deck ID in URL", HTTPStatus.BAD_REQUEST)

        if not inserted_ids:
            return _error_response(
                "Card created but ID not found", HTTPStatus.INTERNAL_SERVER_ERROR
            )
        card_id = inserted_ids[0]
        logger.info("Adding card with ID %d to deck %d", card_id, deck_id)
        try:
            db.add_card_to_deck(conn, card_id, deck_id)
        except sqlite3.Error as exc:
            logger.error("%s", exc)
            return _error_response(
                "Error adding card to deck", HTTPStatus.INTERNAL_SERVER_ERROR
            )
        return _json_response(
            {
                "message": "Card created and added to deck successfully",
                "card": asdict(new_card),
            }
        )

    def delete(request: Request) -> Response:
        try:
            body = _decode_object(request, {"id": int})
        except _InvalidBody:
            return _error_response("Invalid request body", HTTPStatus.BAD_REQUEST)
        if body["id"] <= 0:
            return _error_response("Invalid card ID", HTTPStatus.BAD_REQUEST)
        try:
            db.delete_card_by_id(conn, body["id"])
        except sqlite3.Error:
            return _error_response("Error deleting card", HTTPStatus.INTERNAL_SERVER_ERROR)
        return _json_response({"message": "Card deleted successfully"})

    def update(request: Request) -> Response:
        try:
            body = _decode_object(request, _CARD_FIELDS)
        except _InvalidBody:
            return _error_response("Invalid request body", HTTPStatus.BAD_REQUEST)
        card = db.Card(**body)
        if not card.front or not card.back or card.id == 0:
            return _error_response("Front, back, and ID are required", HTTPStatus.BAD_REQUEST)
        try:
            db.update_card(conn, card)
        except sqlite3.Error:
            return _error_response("Error updating card", HTTPStatus.INTERNAL_SERVER_ERROR)
        return _json_response({"message": "Card updated successfully", "card": asdict(card)})

    def handle(request: Request) -> Response:
        if request.method == "POST":
            return create(request)
        if request.method == "DELETE":
            return delete(request)
        if request.method == "PUT":
            return update(request)
        return Response(status=HTTPStatus.OK)

    return handle