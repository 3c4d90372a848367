"""Request handling for creating, finding, listing and deleting short links."""

from __future__ import annotations

import json
import sqlite3
from dataclasses import dataclass

from . import database
from .database import LinkInfo
from .slugs import gen_link, validate_link

# Longest allowed expiry delay: five years, in seconds.
MAX_EXPIRY_DELAY = 157784760


@dataclass(frozen=True)
class LinkSettings:
    """The settings that govern how new links are created."""

    slug_style: str = "Pair"
    slug_length: int = 8
    allow_capital_letters: bool = False
    public_mode_expiry_delay: int = 0
    try_longer_slug: bool = False


@dataclass(frozen=True)
class CreatedLink:
    """A link that was stored: its short form and expiry time (0 for never)."""

    shortlink: str
    expiry_time: int


class LinkError(Exception):
    """A link could not be created; ``reason`` says why."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


@dataclass
class _LinkRequest:
    longlink: str
    shortlink: str = ""
    expiry_delay: int = 0


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _parse_request(request: str) -> _LinkRequest:
    try:
        payload = json.loads(request)
    except (json.JSONDecodeError, TypeError):
        raise LinkError("Invalid request!") from None
    if not isinstance(payload, dict):
        raise LinkError("Invalid request!")

    longlink = payload.get("longlink")
    shortlink = payload.get("shortlink", "")
    expiry_delay = payload.get("expiry_delay", 0)
    if (
        not isinstance(longlink, str)
        or not isinstance(shortlink, str)
        or not _is_int(expiry_delay)
    ):
        raise LinkError("Invalid request!")
    return _LinkRequest(longlink, shortlink, expiry_delay)


def _is_unique_violation(error: sqlite3.Error) -> bool:
    return isinstance(error, sqlite3.IntegrityError) and "UNIQUE constraint failed" in str(error)


def get_longurl(
    db: sqlite3.Connection, shortlink: str, needhits: bool, allow_capital_letters: bool
) -> LinkInfo | None:
    """Look up a short link, returning None if it is invalid or not stored."""
    if not validate_link(shortlink, allow_capital_letters):
        return None
    return database.find_url(db, shortlink, needhits)


def getall_json(db: sqlite3.Connection) -> str:
    """Return every unexpired link as a compact JSON array."""
    rows = [row.to_dict() for row in database.getall(db)]
    return json.dumps(rows, separators=(",", ":"))


def add_link(
    db: sqlite3.Connection,
    request: str,
    settings: LinkSettings,
    using_public_mode: bool,
) -> CreatedLink:
    """Create a link from a JSON request body.

    Raises LinkError with a human-readable reason when the link cannot be added.
    """
    link = _parse_request(request)

    shortlink_provided = bool(link.shortlink)
    if not shortlink_provided:
        link.shortlink = gen_link(
            settings.slug_style, settings.slug_length, settings.allow_capital_letters
        )

    if using_public_mode and settings.public_mode_expiry_delay > 0:
        if link.expiry_delay == 0:
            link.expiry_delay = settings.public_mode_expiry_delay
        else:
            link.expiry_delay = min(link.expiry_delay, settings.public_mode_expiry_delay)

    link.expiry_delay = max(min(link.expiry_delay, MAX_EXPIRY_DELAY), 0)

    if not validate_link(link.shortlink, settings.allow_capital_letters):
        raise LinkError("Short URL is not valid!")

    try:
        expiry_time = database.add_link(
            db, link.shortlink, link.longlink, link.expiry_delay
        )
    except sqlite3.Error as error:
        if not _is_unique_violation(error):
            raise LinkError("Something went extremely wrong!") from error
        if shortlink_provided:
            raise LinkError("Short URL is already in use!") from error
        if not (settings.slug_style == "UID" and settings.try_longer_slug):
            raise LinkError("Something went wrong!") from error

        link.shortlink = gen_link(
            settings.slug_style, settings.slug_length + 4, settings.allow_capital_letters
        )
        try:
            expiry_time = database.add_link(
                db, link.shortlink, link.longlink, link.expiry_delay
            )
        except sqlite3.Error as retry_error:
            raise LinkError("Something went very wrong!") from retry_error

    return CreatedLink(link.shortlink, expiry_time)


def delete_link(
    db: sqlite3.Connection, shortlink: str, allow_capital_letters: bool
) -> bool:
    """Delete a valid short link; return whether it existed."""
    if not validate_link(shortlink, allow_capital_letters):
        return False
    return database.delete_link(db, shortlink)