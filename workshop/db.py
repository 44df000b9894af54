"""Flashcard storage: cards, decks and the links between them, kept in SQLite."""

from __future__ import annotations

import random
import re
import sqlite3
from dataclasses import dataclass
from typing import Iterable

DEFAULT_DATABASE = "flashcard.db"

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass
class Card:
    """A flashcard with its review state."""

    id: int
    front: str
    back: str
    reviewed: int = 0
    difficulty: int = 0


@dataclass
class Deck:
    """A named collection of cards."""

    id: int
    name: str


@dataclass(frozen=True)
class TableSchema:
    """A table name together with the statement that creates it."""

    name: str
    create_sql: str


CARDS_TABLE = TableSchema(
    name="cards",
    create_sql="""CREATE TABLE IF NOT EXISTS cards (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        front TEXT NOT NULL,
        back TEXT NOT NULL,
        recency BIGINT NOT NULL,
        prevdifficulty INT NOT NULL
    );""",
)

DECKS_TABLE = TableSchema(
    name="decks",
    create_sql="""CREATE TABLE IF NOT EXISTS decks (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL
    );""",
)

DECK_CARDS_TABLE = TableSchema(
    name="deck_cards",
    create_sql="""CREATE TABLE IF NOT EXISTS deck_cards (
        card_id INT NOT NULL,
        deck_id INT NOT NULL,
        PRIMARY KEY (card_id, deck_id),
        FOREIGN KEY (card_id) REFERENCES cards(id) ON DELETE CASCADE,
        FOREIGN KEY (deck_id) REFERENCES decks(id) ON DELETE CASCADE
    );""",
)

CURRENT_TABLES = (CARDS_TABLE, DECKS_TABLE, DECK_CARDS_TABLE)


def create_card(id: int, front: str, back: str, reviewed: int, difficulty: int) -> Card:
    """Build a card, rejecting a negative id or empty faces."""
    if id < 0 or not front or not back:
        raise ValueError("invalid card data")
    return Card(id=id, front=front, back=back, reviewed=reviewed, difficulty=difficulty)


def create_deck(id: int, name: str) -> Deck:
    """Build a deck, rejecting a non-positive id or an empty name."""
    if id <= 0 or not name:
        raise ValueError("invalid id or name")
    return Deck(id=id, name=name)


def connect_to_db(database: str = DEFAULT_DATABASE) -> sqlite3.Connection:
    """Open the database in autocommit mode with foreign keys enforced."""
    try:
        conn = sqlite3.connect(database, isolation_level=None, check_same_thread=False)
        conn.execute("PRAGMA foreign_keys = ON")
    except sqlite3.Error as exc:
        print(f"Error pinging database: {exc}")
        raise
    return conn


def create_table_from_schema(conn: sqlite3.Connection, schema: TableSchema) -> None:
    """Create one table from its schema."""
    try:
        conn.execute(schema.create_sql)
    except sqlite3.Error as exc:
        raise sqlite3.DatabaseError(f"error creating table {schema.name}: {exc}") from exc


def create_all_tables(conn: sqlite3.Connection, tables: Iterable[TableSchema]) -> None:
    """Create every table in order, stopping at the first failure."""
    for table in tables:
        create_table_from_schema(conn, table)


def drop_table(conn: sqlite3.Connection, table_name: str) -> None:
    """Drop a table if it exists."""
    if not _IDENTIFIER.match(table_name):
        raise ValueError(f"failed to drop table {table_name}: invalid table name")
    try:
        conn.execute(f"DROP TABLE IF EXISTS {table_name};")
    except sqlite3.Error as exc:
        raise sqlite3.DatabaseError(f"failed to drop table {table_name}: {exc}") from exc
    print(f"Table {table_name} dropped successfully.")


def drop_all_tables(conn: sqlite3.Connection) -> None:
    """Drop the link table, then cards and decks."""
    for table in ("deck_cards", "cards", "decks"):
        try:
            drop_table(conn, table)
        except (sqlite3.Error, ValueError) as exc:
            raise sqlite3.DatabaseError(f"error dropping table {table}: {exc}") from exc


def insert_cards(conn: sqlite3.Connection, cards: Iterable[Card]) -> list[int]:
    """Insert cards and return the ids the database gave them."""
    ids = []
    for card in cards:
        cursor = conn.execute(
            "INSERT INTO cards (front, back, recency, prevdifficulty) VALUES (?, ?, ?, ?)",
            (card.front, card.back, card.reviewed, card.difficulty),
        )
        ids.append(cursor.lastrowid)
    return ids


def update_card(conn: sqlite3.Connection, card: Card) -> None:
    """Overwrite a stored card's fields by id."""
    conn.execute(
        "UPDATE cards SET front = ?, back = ?, recency = ?, prevdifficulty = ? WHERE id = ?",
        (card.front, card.back, card.reviewed, card.difficulty, card.id),
    )


def add_card_to_deck(conn: sqlite3.Connection, card_id: int, deck_id: int) -> None:
    """Link a card to a deck; linking twice is harmless."""
    try:
        conn.execute(
            "INSERT OR IGNORE INTO deck_cards (card_id, deck_id) VALUES (?, ?);",
            (card_id, deck_id),
        )
    except sqlite3.Error as exc:
        raise sqlite3.DatabaseError(
            f"failed to add card {card_id} to deck {deck_id}: {exc}"
        ) from exc


def insert_deck(conn: sqlite3.Connection, deck_name: str) -> int:
    """Insert a deck and return its id."""
    cursor = conn.execute("INSERT INTO decks (name) VALUES (?)", (deck_name,))
    return cursor.lastrowid


def _card_from_row(row: tuple) -> Card:
    card_id, front, back, reviewed, difficulty = row
    return Card(id=card_id, front=front, back=back, reviewed=reviewed, difficulty=difficulty)


def print_cards(conn: sqlite3.Connection) -> None:
    """Print every stored card."""
    for row in conn.execute("SELECT * FROM cards"):
        card = _card_from_row(row)
        print(
            f"Front: {card.front}, Back: {card.back}, ID: {card.id}, "
            f"Reviewed: {card.reviewed}, Difficulty: {card.difficulty}"
        )


def print_cards_in_deck(conn: sqlite3.Connection, deck_id: int) -> None:
    """Print the cards that belong to one deck."""
    query = """
        SELECT cards.* FROM cards
        JOIN deck_cards ON cards.id = deck_cards.card_id
        WHERE deck_cards.deck_id = ?;"""
    try:
        rows = conn.execute(query, (deck_id,)).fetchall()
    except sqlite3.Error as exc:
        raise sqlite3.DatabaseError(f"error querying cards: {exc}") from exc
    print(f"Cards in deck {deck_id}:")
    for row in rows:
        card = _card_from_row(row)
        print(f"- ID: {card.id}, Front: {card.front}, Back: {card.back}")


def delete_card(conn: sqlite3.Connection, card: Card) -> None:
    """Delete the given card."""
    delete_card_by_id(conn, card.id)


def delete_card_by_id(conn: sqlite3.Connection, card_id: int) -> None:
    """Delete a card by id."""
    conn.execute("DELETE FROM cards WHERE id = ?", (card_id,))


def delete_deck_by_id(conn: sqlite3.Connection, deck_id: int) -> None:
    """Delete a deck by id; its links to cards go with it."""
    try:
        conn.execute("DELETE FROM decks WHERE id = ?", (deck_id,))
    except sqlite3.Error as exc:
        raise sqlite3.DatabaseError(f"error deleting deck: {exc}") from exc


def get_random_card(conn: sqlite3.Connection) -> Card:
    """Fetch a card whose id is drawn at random from 1 to the card count."""
    try:
        (count,) = conn.execute("SELECT COUNT(*) FROM cards").fetchone()
    except sqlite3.Error as exc:
        raise sqlite3.DatabaseError(f"error getting card count: {exc}") from exc
    if count <= 0:
        raise sqlite3.DatabaseError("error getting card: no cards")

    random_id = random.randint(1, count)
    try:
        row = conn.execute(
            "SELECT id, front, back FROM cards WHERE id = ?", (random_id,)
        ).fetchone()
    except sqlite3.Error as exc:
        raise sqlite3.DatabaseError(f"error getting card: {exc}") from exc
    if row is None:
        raise sqlite3.DatabaseError("error getting card: no rows in result set")
    card_id, front, back = row
    return Card(id=card_id, front=front, back=back)


def get_cards_from_deck(conn: sqlite3.Connection, deck_id: int) -> list[Card]:
    """Return the cards that belong to one deck."""
    try:
        rows = conn.execute(
            """
            SELECT c.*
            FROM cards c
            JOIN deck_cards dc ON c.id = dc.card_id
            WHERE dc.deck_id = ?
            """,
            (deck_id,),
        ).fetchall()
    except sqlite3.Error as exc:
        raise sqlite3.DatabaseError(f"error getting cards for deck: {exc}") from exc
    return [_card_from_row(row) for row in rows]


def get_decks_data(conn: sqlite3.Connection) -> list[Deck]:
    """Return every deck."""
    try:
        rows = conn.execute("SELECT * FROM decks").fetchall()
    except sqlite3.Error as exc:
        raise sqlite3.DatabaseError(f"error getting decks: {exc}") from exc
    return [Deck(id=deck_id, name=name) for deck_id, name in rows]