import json
import time
from unittest import mock

import pytest

from linkshort.database import open_db
from linkshort.links import (
    CreatedLink,
    LinkError,
    LinkSettings,
    add_link,
    delete_link,
    get_longurl,
    getall_json,
)

MAX_DELAY = 157784760


@pytest.fixture
def db():
    connection = open_db(":memory:")
    yield connection
    connection.close()


def _request(**fields):
    return json.dumps(fields)


def test_add_with_given_shortlink_and_lookup(db):
    created = add_link(
        db, _request(shortlink="abc", longlink="https://example.com"), LinkSettings(), False
    )
    assert created == CreatedLink("abc", 0)
    info = get_longurl(db, "abc", True, False)
    assert info.longlink == "https://example.com"
    assert info.hits == 0
    assert info.expiry_time == 0


def test_duplicate_shortlink_rejected(db):
    body = _request(shortlink="dup", longlink="https://example.com")
    add_link(db, body, LinkSettings(), False)
    with pytest.raises(LinkError) as excinfo:
        add_link(db, body, LinkSettings(), False)
    assert excinfo.value.reason == "Short URL is already in use!"


@pytest.mark.parametrize(
    "body",
    [
        "not json",
        json.dumps({"shortlink": "abc"}),
        json.dumps({"longlink": 5}),
        json.dumps({"longlink": "https://example.com", "expiry_delay": 1.5}),
        json.dumps({"longlink": "https://example.com", "shortlink": None}),
        json.dumps(["https://example.com"]),
    ],
)
def test_invalid_request(db, body):
    with pytest.raises(LinkError) as excinfo:
        add_link(db, body, LinkSettings(), False)
    assert excinfo.value.reason == "Invalid request!"


def test_invalid_shortlink_rejected(db):
    body = _request(shortlink="ABC", longlink="https://example.com")
    with pytest.raises(LinkError) as excinfo:
        add_link(db, body, LinkSettings(), False)
    assert excinfo.value.reason == "Short URL is not valid!"


def test_capital_shortlink_allowed_when_enabled(db):
    settings = LinkSettings(allow_capital_letters=True)
    created = add_link(db, _request(shortlink="ABC", longlink="https://example.com"), settings, False)
    assert created.shortlink == "ABC"
    assert get_longurl(db, "ABC", False, True).longlink == "https://example.com"


def test_generated_uid_has_configured_length(db):
    settings = LinkSettings(slug_style="UID", slug_length=12)
    created = add_link(db, _request(longlink="https://example.com"), settings, False)
    assert len(created.shortlink) == 12
    assert get_longurl(db, created.shortlink, False, False).longlink == "https://example.com"


def test_generated_pair_slug(db):
    created = add_link(db, _request(longlink="https://example.com"), LinkSettings(), False)
    adjective, name = created.shortlink.split("-")
    assert adjective and name


def test_public_mode_applies_default_delay(db):
    settings = LinkSettings(public_mode_expiry_delay=3600)
    before = int(time.time())
    created = add_link(db, _request(longlink="https://example.com"), settings, True)
    after = int(time.time())
    assert before + 3600 <= created.expiry_time <= after + 3600


def test_public_mode_caps_requested_delay(db):
    settings = LinkSettings(public_mode_expiry_delay=60)
    before = int(time.time())
    created = add_link(
        db, _request(longlink="https://example.com", expiry_delay=100000), settings, True
    )
    after = int(time.time())
    assert before + 60 <= created.expiry_time <= after + 60


def test_public_mode_ignored_when_not_used(db):
    settings = LinkSettings(public_mode_expiry_delay=60)
    created = add_link(db, _request(longlink="https://example.com"), settings, False)
    assert created.expiry_time == 0


def test_negative_delay_clamped_to_never(db):
    created = add_link(
        db, _request(longlink="https://example.com", expiry_delay=-50), LinkSettings(), False
    )
    assert created.expiry_time == 0


def test_delay_capped_at_five_years(db):
    before = int(time.time())
    created = add_link(
        db,
        _request(longlink="https://example.com", expiry_delay=MAX_DELAY * 10),
        LinkSettings(),
        False,
    )
    after = int(time.time())
    assert before + MAX_DELAY <= created.expiry_time <= after + MAX_DELAY


def test_generated_collision_retries_longer_uid(db):
    settings = LinkSettings(slug_style="UID", slug_length=4, try_longer_slug=True)
    with mock.patch("secrets.choice", return_value="a"):
        first = add_link(db, _request(longlink="https://example.com/1"), settings, False)
        second = add_link(db, _request(longlink="https://example.com/2"), settings, False)
    assert first.shortlink == "aaaa"
    assert second.shortlink == "aaaaaaaa"
    assert get_longurl(db, "aaaaaaaa", False, False).longlink == "https://example.com/2"


def test_generated_collision_retry_also_collides(db):
    settings = LinkSettings(slug_style="UID", slug_length=4, try_longer_slug=True)
    add_link(db, _request(shortlink="aaaaaaaa", longlink="https://example.com/0"), settings, False)
    with mock.patch("secrets.choice", return_value="a"):
        add_link(db, _request(longlink="https://example.com/1"), settings, False)
        with pytest.raises(LinkError) as excinfo:
            add_link(db, _request(longlink="https://example.com/2"), settings, False)
    assert excinfo.value.reason == "Something went very wrong!"


def test_generated_collision_without_retry(db):
    settings = LinkSettings(slug_style="UID", slug_length=4)
    with mock.patch("secrets.choice", return_value="a"):
        add_link(db, _request(longlink="https://example.com/1"), settings, False)
        with pytest.raises(LinkError) as excinfo:
            add_link(db, _request(longlink="https://example.com/2"), settings, False)
    assert excinfo.value.reason == "Something went wrong!"


def test_get_longurl_invalid_slug_returns_none(db):
    add_link(db, _request(shortlink="abc", longlink="https://example.com"), LinkSettings(), False)
    assert get_longurl(db, "a/b", True, False) is None
    assert get_longurl(db, "missing", True, False) is None


def test_getall_json_round_trip(db):
    add_link(db, _request(shortlink="one", longlink="https://example.com/1"), LinkSettings(), False)
    add_link(db, _request(shortlink="two", longlink="https://example.com/2"), LinkSettings(), False)
    rows = json.loads(getall_json(db))
    assert [row["shortlink"] for row in rows] == ["one", "two"]
    assert rows[1] == {
        "shortlink": "two",
        "longlink": "https://example.com/2",
        "hits": 0,
        "expiry_time": 0,
    }


def test_getall_json_empty(db):
    assert getall_json(db) == "[]"


def test_delete_link(db):
    add_link(db, _request(shortlink="gone", longlink="https://example.com"), LinkSettings(), False)
    assert delete_link(db, "gone", False) is True
    assert delete_link(db, "gone", False) is False
    assert get_longurl(db, "gone", False, False) is None


def test_delete_invalid_slug(db):
    add_link(
        db,
        _request(shortlink="Keep", longlink="https://example.com"),
        LinkSettings(allow_capital_letters=True),
        False,
    )
    assert delete_link(db, "Keep", False) is False
    assert get_longurl(db, "Keep", False, True).longlink == "https://example.com"