# workshop

A small personal web workshop served as a WSGI application (werkzeug). It
bundles:

- **Flashcards** – a JSON API over decks of two-sided cards stored in a
  SQLite database.
- **Game of Life** – an HTML page with a canvas and controls, plus an API
  that lists and reads pattern files from disk.
- **Static files** – everything else is served from a static directory.

## Installing

```
pip install .
```

For running the test suite:

```
pip install ".[test]"
pytest
```

## Running

```
workshop
```

The command opens (or creates) the SQLite file, creates the `cards`, `decks`
and `deck_cards` tables if they are missing, and serves the site with
werkzeug's development server. Options:

| Option       | Default        | Meaning                         |
|--------------|----------------|---------------------------------|
| `--database` | `flashcard.db` | SQLite database file            |
| `--static`   | `static`       | Directory of static files       |
| `--host`     | `0.0.0.0`      | Address to listen on            |
| `--port`     | `8080`         | Port to listen on               |

Open `http://localhost:8080/home` for the dashboard.

## Pages

| Path            | What it shows                                   |
|-----------------|-------------------------------------------------|
| `/home`         | Dashboard with project links                    |
| `/projects/gol` | Game of Life canvas, controls and pattern picker |

Any other path is served from the static directory: a directory answers with
its `index.html` or a file listing, and a missing file gives `404`. Under
`/static/` the same directory is served with the prefix removed, and files
ending in `.js` are sent as `application/javascript`. The pages load
`/static/gol.js`, `/static/favicon.ico`, `/static/vendor/tailwind.min.css`
and `/static/vendor/htmx.min.js`; these files are not part of the package
and have to be put in the static directory.

## JSON API

| Method | Path                          | Purpose                                          |
|--------|-------------------------------|--------------------------------------------------|
| GET    | `/api/flashcard`              | A random card                                    |
| POST   | `/api/flashcard/rate`         | Check form fields `ID` and `Rating` are integers and print them |
| GET    | `/api/flashcard/decks`        | All decks                                        |
| POST   | `/api/flashcard/decks/`       | Create a deck from `{"name": ...}`; replies `{"DeckName": ...}` |
| DELETE | `/api/flashcard/decks/<id>`   | Delete a deck (`204 No Content`)                 |
| GET    | `/api/flashcard/cards/<id>`   | Cards in deck `<id>`                             |
| POST   | `/api/flashcard/cards`        | Create a card from `{"front": ..., "back": ...}` and add it to the deck whose id is the seventh `/`-separated part of the `Referer` header (e.g. `http://localhost:8080/projects/flashcard/edit/3`) |
| PUT    | `/api/flashcard/cards`        | Update a card from a full card object            |
| DELETE | `/api/flashcard/cards`        | Delete a card given `{"id": ...}`                |
| GET    | `/api/gol/patterns`           | Sorted names of the files in `<static>/patterns` (`null` when there are none) |
| GET    | `/api/gol/patterns/<name>`    | `{"filename": ..., "contents": ...}` for a file  |

Cards are encoded as `{"id", "front", "back", "reviewed", "difficulty"}` and
decks as `{"id", "name"}`. Errors are plain-text replies with the matching
status code (`400`, `404`, `405`, `409` for an unreadable card body on POST,
`500`).

The random card is the one whose id is drawn between 1 and the number of
cards, so once cards have been deleted the draw can miss and the reply is a
`500`.

## Using it as a library

```python
from workshop.db import CURRENT_TABLES, connect_to_db, create_all_tables, create_card, insert_cards
from workshop.app import create_app

conn = connect_to_db("flashcards.db")
create_all_tables(conn, CURRENT_TABLES)
ids = insert_cards(conn, [create_card(0, "hola", "hello", 0, 0)])

application = create_app(conn, "static")   # a WSGI application
```

- `workshop.db` – `Card`, `Deck`, `TableSchema`, the table schemas, and
  functions to create, update, link, delete, list and print cards and decks.
  `create_card` and `create_deck` raise `ValueError` on invalid data; database
  failures raise `sqlite3` errors.
- `workshop.components` – `header()`, `home()`, `gol_page()` and
  `hello(name)` return HTML strings.
- `workshop.handlers` – one factory per API route; each takes a connection
  and returns a function from a werkzeug `Request` to a `Response`.
- `workshop.app` – `list_pattern_files`, `get_file_contents`, `create_app`
  and `main`.

## What it does not do

- The flashcard pages linked from the dashboard (`/projects/flashcard`,
  `/projects/flashcard/random`, deck study and deck edit pages) are not
  rendered by the package; those paths fall through to the static directory.
- Ratings sent to `/api/flashcard/rate` are not stored.
- The Game of Life itself runs in the browser script `gol.js`, which the
  package does not provide.