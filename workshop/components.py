"""HTML fragments for the workshop pages."""

from __future__ import annotations

TAILWIND_CSS = "/static/vendor/tailwind.min.css"
HTMX_JS = "/static/vendor/htmx.min.js"

_ESCAPES = str.maketrans(
    {
        "&": "&amp;",
        "'": "&#39;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&#34;",
    }
)

_BUTTON = "px-4 py-2 border border-gray-700 bg-gray-300 rounded-md"
_NAV_LINK = "px-4 hover:bg-gray-600 bg-gray-700 py-2 rounded-md"
_PROJECT_LINK = "p-1 bg-green-300 hover:bg-green-400 rounded-md"


def _escape(text: str) -> str:
    """Escape the characters that are special in HTML text and attributes."""
    return text.translate(_ESCAPES)


def header() -> str:
    """The site header with the home link, a back button and navigation."""
    nav = " ".join(
        f'<a href="{href}" class="{_NAV_LINK}">{label}</a>'
        for href, label in (
            ("/projects", "Projects"),
            ("/learn", "Learn"),
            ("/data", "Data"),
            ("/about", "About"),
        )
    )
    return (
        '<header id="header" class="bg-gray-800 text-white p-4 flex justify-between items-center">'
        '<div class="flex items-center space-x-4">'
        '<a href="/home" class="text-lg font-bold">Workshop</a> '
        f'<button onclick="history.back()" class="{_NAV_LINK}">Back</button>'
        "</div>"
        f'<nav class="space-x-4">{nav}</nav>'
        "</header>"
    )


def gol_page() -> str:
    """The Game of Life page: canvas, controls and the pattern picker."""
    controls = " ".join(
        f'<button class="{_BUTTON}" onclick="{action}()">{label}</button>'
        for action, label in (
            ("startGame", "Start"),
            ("stopGame", "Stop"),
            ("resetGame", "Reset"),
        )
    )
    return (
        '<body class="bg-gray-200 h-screen w-screen m-0 p-0">'
        f'<link href="{TAILWIND_CSS}" rel="stylesheet">'
        '<script src="/static/gol.js" defer></script>'
        '<div class="flex flex-col h-full">'
        f"{header()}"
        '<div class="flex-grow flex flex-col items-center justify-center">'
        '<canvas class="border border-black m-0 p-0 w-full h-full" id="gameCanvas"></canvas>'
        '<div class="flex justify-between w-full p-4">'
        f'<div class="flex space-x-2">{controls}</div>'
        f'<button class="{_BUTTON}" id="loadPatternsButton">Load Patterns</button>'
        '<div class="text-xl mt-3" id="generationCounter">Generation: 0</div>'
        '<div id="fileModal" class="hidden absolute inset-0 bg-gray-800 bg-opacity-75 '
        'flex items-center justify-center">'
        '<div class="bg-white p-6 rounded-lg max-w-4xl w-full">'
        '<h2 class="text-2xl mb-4">Select a Pattern</h2>'
        '<div id="fileGrid" class="grid sm:grid-cols-2 md:grid-cols-3 lg:grid-cols-4 '
        'xl:grid-cols-5 gap-4"><!-- File items will be populated here --></div>'
        '<button id="loadFileButton" class="mt-4 px-4 py-2 bg-green-500 text-white rounded">'
        "Load</button> "
        '<button id="closeModalButton" class="mt-4 px-4 py-2 bg-red-500 text-white rounded">'
        "Close</button>"
        "</div></div></div></div></div></body>"
    )


def hello(name: str) -> str:
    """A greeting for the given name, escaped for HTML."""
    return f"<div>Hello, {_escape(name)}! </div>"


def home() -> str:
    """The landing page with the dashboard, project links and transactions."""
    projects = "".join(
        f'<li class="my-3"><a class="{_PROJECT_LINK}" href="{href}">{label}</a></li>'
        for href, label in (
            ("/projects/flashcard", "Flashcards"),
            ("/projects/flashcard/random", "Random Flashcard"),
            ("/projects/gol", "Game of Life"),
        )
    )
    transactions = "".join(f"<li>Transaction {n}</li>" for n in range(1, 4))
    return (
        '<body class="bg-gray-400">'
        '<link rel="icon" href="/static/favicon.ico" type="image/x-icon">'
        f'<script src="{HTMX_JS}"></script>'
        f'<link href="{TAILWIND_CSS}" rel="stylesheet">'
        '<div class="mx-auto">'
        f"{header()}"
        '<div class="min-h-screen flex flex-col">'
        '<div class="flex-1 bg-blue-200" style="height: 50vh;">'
        '<div class="text-xl font-bold text-white p-5">Dashboard Area</div>'
        '<div class="p-5 text-white">Content that you can customize for tracking '
        "various metrics or statuses.</div>"
        "</div>"
        '<div class="flex w-full" style="height: 50vh;">'
        '<div class="w-1/2 bg-green-200 p-5">'
        '<div class="text-xl font-bold">Projects</div>'
        f'<ul class="list-disc list-inside">{projects}</ul>'
        "</div>"
        '<div class="w-1/2 bg-red-200 p-5">'
        '<div class="text-xl font-bold">Transactions</div>'
        f'<ul class="list-disc list-inside">{transactions}</ul>'
        "</div></div></div></div></body>"
    )