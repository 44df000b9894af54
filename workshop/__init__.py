"""Flashcard JSON API, Game of Life page and static file server as a WSGI application."""

__version__ = "0.1.0"
__all__ = ["__version__"]