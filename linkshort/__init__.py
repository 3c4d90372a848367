"""SQLite link storage, slug handling and link operations for a URL shortener."""

__version__ = "6.2.6"
__all__ = ["database", "slugs", "links"]