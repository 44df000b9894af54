import json
import sqlite3
from http import HTTPStatus

import pytest
from werkzeug.test import EnvironBuilder

from workshop import db
from workshop.handlers import (
    card_handler,
    deck_handler,
    get_cards_for_deck_handler,
    get_decks_handler,
    random_flashcard_handler,
    rate_flashcard_handler,
)

REFERER = "http://localhost:8080/projects/flashcard/edit/{}"


@pytest.fixture
def conn():
    connection = db.connect_to_db(":memory:")
    db.create_all_tables(connection, db.CURRENT_TABLES)
    yield connection
    connection.close()


def make_request(method, path, **kwargs):
    return EnvironBuilder(method=method, path=path, **kwargs).get_request()


def body_json(response):
    return json.loads(response.get_data(as_text=True))


def add_deck_with_cards(conn, name, faces):
    deck_id = db.insert_deck(conn, name)
    cards = [db.create_card(0, front, back, 0, 0) for front, back in faces]
    for card_id in db.insert_cards(conn, cards):
        db.add_card_to_deck(conn, card_id, deck_id)
    return deck_id


# random flashcard


def test_random_flashcard_rejects_post(conn):
    response = random_flashcard_handler(conn)(make_request("POST", "/api/flashcard"))
    assert response.status_code == HTTPStatus.METHOD_NOT_ALLOWED
    assert response.get_data(as_text=True) == "Method not allowed\n"


def test_random_flashcard_returns_the_only_card(conn):
    db.insert_cards(conn, [db.create_card(0, "hola", "hello", 0, 0)])
    response = random_flashcard_handler(conn)(make_request("GET", "/api/flashcard"))
    assert response.status_code == HTTPStatus.OK
    assert response.headers["Content-Type"] == "application/json"
    card = body_json(response)
    assert (card["front"], card["back"]) == ("hola", "hello")
    assert card["id"] == 1


def test_random_flashcard_with_no_cards_is_server_error(conn):
    response = random_flashcard_handler(conn)(make_request("GET", "/api/flashcard"))
    assert response.status_code == HTTPStatus.INTERNAL_SERVER_ERROR
    assert response.get_data(as_text=True) == "Error fetching card\n"


# cards for a deck


def test_cards_for_deck_lists_cards(conn):
    deck_id = add_deck_with_cards(conn, "Spanish", [("uno", "one"), ("dos", "two")])
    handler = get_cards_for_deck_handler(conn)
    response = handler(make_request("GET", f"/api/flashcard/cards/{deck_id}"))
    assert response.status_code == HTTPStatus.OK
    fronts = sorted(card["front"] for card in body_json(response))
    assert fronts == ["dos", "uno"]


def test_cards_for_unknown_deck_is_empty_list(conn):
    handler = get_cards_for_deck_handler(conn)
    response = handler(make_request("GET", "/api/flashcard/cards/42"))
    assert body_json(response) == []


@pytest.mark.parametrize("path", ["/api/flashcard/cards/abc", "/api/flashcard/cards", "/api/flashcard/cards/1.5"])
def test_cards_for_deck_rejects_bad_id(conn, path):
    response = get_cards_for_deck_handler(conn)(make_request("GET", path))
    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert response.get_data(as_text=True) == "Invalid deck ID\n"


def test_cards_for_deck_rejects_delete(conn):
    response = get_cards_for_deck_handler(conn)(make_request("DELETE", "/api/flashcard/cards/1"))
    assert response.status_code == HTTPStatus.METHOD_NOT_ALLOWED


# decks


def test_decks_lists_every_deck(conn):
    db.insert_deck(conn, "Spanish")
    db.insert_deck(conn, "French")
    response = get_decks_handler(conn)(make_request("GET", "/api/flashcard/decks"))
    assert body_json(response) == [{"id": 1, "name": "Spanish"}, {"id": 2, "name": "French"}]


def test_decks_rejects_put(conn):
    response = get_decks_handler(conn)(make_request("PUT", "/api/flashcard/decks"))
    assert response.status_code == HTTPStatus.METHOD_NOT_ALLOWED


# rating


def test_rate_prints_id_and_rating(conn, capsys):
    request = make_request("POST", "/api/flashcard/rate", data={"ID": "3", "Rating": "5"})
    response = rate_flashcard_handler(conn)(request)
    assert response.status_code == HTTPStatus.OK
    assert "ID: 3, Rating: 5" in capsys.readouterr().out


def test_rate_rejects_bad_id(conn):
    request = make_request("POST", "/api/flashcard/rate", data={"ID": "x", "Rating": "5"})
    response = rate_flashcard_handler(conn)(request)
    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert response.get_data(as_text=True) == "Invalid ID\n"


def test_rate_rejects_missing_rating(conn):
    request = make_request("POST", "/api/flashcard/rate", data={"ID": "3"})
    response = rate_flashcard_handler(conn)(request)
    assert response.get_data(as_text=True) == "Invalid Rating\n"


def test_rate_rejects_get(conn):
    response = rate_flashcard_handler(conn)(make_request("GET", "/api/flashcard/rate"))
    assert response.status_code == HTTPStatus.METHOD_NOT_ALLOWED


# deck handler


def test_deck_post_creates_deck(conn):
    request = make_request("POST", "/api/flashcard/decks/", json={"name": "Spanish"})
    response = deck_handler(conn)(request)
    assert response.status_code == HTTPStatus.OK
    assert body_json(response) == {"DeckName": "Spanish"}
    assert [deck.name for deck in db.get_decks_data(conn)] == ["Spanish"]


def test_deck_post_matches_key_regardless_of_case(conn):
    request = make_request("POST", "/api/flashcard/decks/", json={"NAME": "French"})
    response = deck_handler(conn)(request)
    assert body_json(response) == {"DeckName": "French"}


def test_deck_post_escapes_markup_in_json(conn):
    name = "<b>&</b>"
    request = make_request("POST", "/api/flashcard/decks/", json={"name": name})
    response = deck_handler(conn)(request)
    raw = response.get_data(as_text=True)
    assert "<" not in raw and "&" not in raw
    assert json.loads(raw) == {"DeckName": name}


@pytest.mark.parametrize("payload", [{"name": ""}, {}, {"other": "x"}])
def test_deck_post_rejects_empty_name(conn, payload):
    response = deck_handler(conn)(make_request("POST", "/api/flashcard/decks/", json=payload))
    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert response.get_data(as_text=True) == "Deck name cannot be empty\n"


@pytest.mark.parametrize("raw", ["not json", "", '{"name": 5}', "[1, 2]"])
def test_deck_post_rejects_invalid_body(conn, raw):
    request = make_request("POST", "/api/flashcard/decks/", data=raw)
    response = deck_handler(conn)(request)
    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert response.get_data(as_text=True) == "Invalid request body\n"


def test_deck_delete_removes_deck_and_links(conn):
    deck_id = add_deck_with_cards(conn, "Spanish", [("uno", "one")])
    response = deck_handler(conn)(make_request("DELETE", f"/api/flashcard/decks/{deck_id}"))
    assert response.status_code == HTTPStatus.NO_CONTENT
    assert db.get_decks_data(conn) == []
    assert db.get_cards_from_deck(conn, deck_id) == []


def test_deck_delete_rejects_bad_id(conn):
    response = deck_handler(conn)(make_request("DELETE", "/api/flashcard/decks/abc"))
    assert response.status_code == HTTPStatus.BAD_REQUEST


def test_deck_other_method_changes_nothing(conn):
    db.insert_deck(conn, "Spanish")
    response = deck_handler(conn)(make_request("PUT", "/api/flashcard/decks/1"))
    assert response.status_code == HTTPStatus.OK
    assert len(db.get_decks_data(conn)) == 1


# card handler


def test_card_post_adds_card_to_referring_deck(conn):
    deck_id = db.insert_deck(conn, "Spanish")
    request = make_request(
        "POST",
        "/api/flashcard/cards",
        json={"front": "gato", "back": "cat"},
        headers={"Referer": REFERER.format(deck_id)},
    )
    response = card_handler(conn)(request)
    assert response.status_code == HTTPStatus.OK
    body = body_json(response)
    assert body["message"] == "Card created and added to deck successfully"
    assert body["card"]["id"] == 0
    assert (body["card"]["front"], body["card"]["back"]) == ("gato", "cat")
    assert 0 <= body["card"]["reviewed"] < 1_000_000_000
    cards = db.get_cards_from_deck(conn, deck_id)
    assert [(card.front, card.back) for card in cards] == [("gato", "cat")]


def test_card_post_with_bad_referer_still_inserts_card(conn):
    request = make_request(
        "POST",
        "/api/flashcard/cards",
        json={"front": "gato", "back": "cat"},
        headers={"Referer": "http://localhost:8080/home"},
    )
    response = card_handler(conn)(request)
    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert response.get_data(as_text=True) == "Invalid deck ID in URL\n"
    (count,) = conn.execute("SELECT COUNT(*) FROM cards").fetchone()
    assert count == 1


def test_card_post_invalid_body_is_conflict(conn):
    request = make_request("POST", "/api/flashcard/cards", data="{broken")
    response = card_handler(conn)(request)
    assert response.status_code == HTTPStatus.CONFLICT


def test_card_post_rejects_empty_faces(conn):
    request = make_request("POST", "/api/flashcard/cards", json={"front": "gato", "back": ""})
    response = card_handler(conn)(request)
    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert response.get_data(as_text=True) == "Front and back content cannot be empty\n"


def test_card_delete_removes_card(conn):
    (card_id,) = db.insert_cards(conn, [db.create_card(0, "uno", "one", 0, 0)])
    request = make_request("DELETE", "/api/flashcard/cards", json={"id": card_id})
    response = card_handler(conn)(request)
    assert body_json(response) == {"message": "Card deleted successfully"}
    (count,) = conn.execute("SELECT COUNT(*) FROM cards").fetchone()
    assert count == 0


@pytest.mark.parametrize("payload", [{"id": 0}, {"id": -3}, {}])
def test_card_delete_rejects_non_positive_id(conn, payload):
    response = card_handler(conn)(make_request("DELETE", "/api/flashcard/cards", json=payload))
    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert response.get_data(as_text=True) == "Invalid card ID\n"


def test_card_delete_rejects_non_integer_id(conn):
    request = make_request("DELETE", "/api/flashcard/cards", json={"id": "7"})
    response = card_handler(conn)(request)
    assert response.get_data(as_text=True) == "Invalid request body\n"


def test_card_put_updates_card(conn):
    (card_id,) = db.insert_cards(conn, [db.create_card(0, "uno", "one", 0, 0)])
    payload = {"id": card_id, "front": "dos", "back": "two", "reviewed": 7, "difficulty": 2}
    response = card_handler(conn)(make_request("PUT", "/api/flashcard/cards", json=payload))
    body = body_json(response)
    assert body == {"message": "Card updated successfully", "card": payload}
    row = conn.execute("SELECT * FROM cards WHERE id = ?", (card_id,)).fetchone()
    assert row == (card_id, "dos", "two", 7, 2)


@pytest.mark.parametrize(
    "payload",
    [{"front": "dos", "back": "two"}, {"id": 1, "front": "", "back": "two"}],
)
def test_card_put_requires_id_and_faces(conn, payload):
    response = card_handler(conn)(make_request("PUT", "/api/flashcard/cards", json=payload))
    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert response.get_data(as_text=True) == "Front, back, and ID are required\n"


def test_card_put_rejects_wrong_field_type(conn):
    payload = {"id": 1, "front": 3, "back": "two"}
    response = card_handler(conn)(make_request("PUT", "/api/flashcard/cards", json=payload))
    assert response.get_data(as_text=True) == "Invalid request body\n"


def test_card_put_on_closed_connection_is_server_error():
    connection = sqlite3.connect(":memory:")
    connection.close()
    payload = {"id": 1, "front": "dos", "back": "two"}
    response = card_handler(connection)(make_request("PUT", "/api/flashcard/cards", json=payload))
    assert response.status_code == HTTPStatus.INTERNAL_SERVER_ERROR
    assert response.get_data(as_text=True) == "Error updating card\n"