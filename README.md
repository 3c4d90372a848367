# linkshort

The storage and link-handling core of a small self-hosted URL shortener.
Links are kept in a single SQLite file. Each link has a short slug, a target
URL, a hit counter and an expiry time. An expiry time of `0` means the link
never expires.

Python 3.10 or later is required. The package uses only the standard library.

## Installation

```
pip install linkshort
```

## Modules

### `linkshort.database`

This module holds the SQLite storage. Every function takes an open
`sqlite3.Connection` as its first argument.

- `open_db(path)` opens or creates the database. It creates the `urls` table
  and its indexes, adds the `expiry_time` column to older databases, and sets
  `PRAGMA user_version` to `1`. The connection runs in autocommit mode and may
  be used from more than one thread.
- `find_url(db, shortlink, needhits)` returns a `LinkInfo` for an unexpired
  link, or `None` if there is no such link. `LinkInfo` has the fields
  `longlink`, `hits` and `expiry_time`. `hits` and `expiry_time` are filled in
  only when `needhits` is true.
- `getall(db)` returns every unexpired link as a list of `LinkRow`, in the
  order the links were added. `LinkRow` has the fields `shortlink`,
  `longlink`, `hits` and `expiry_time`, and `LinkRow.to_dict()` turns a row
  into a plain dict.
- `add_hit(db, shortlink)` adds one to a link's hit counter.
- `add_link(db, shortlink, longlink, expiry_delay)` runs `cleanup` first and
  then stores the link. It returns the expiry time: the current Unix time plus
  `expiry_delay` seconds, or `0` when the delay is `0`. If the slug is already
  taken, it raises `sqlite3.IntegrityError`.
- `cleanup(db)` deletes expired links, logs each of them through the
  `linkshort.database` logger at INFO level, and returns how many links it
  removed.
- `delete_link(db, shortlink)` deletes a link and returns whether anything was
  removed.

### `linkshort.slugs`

- `validate_link(link, allow_capital_letters)` accepts only non-empty slugs
  made of `a-z`, `0-9`, `-` and `_`. When `allow_capital_letters` is true it
  also accepts `A-Z`.
- `gen_link(style, length, allow_capital_letters)` makes a random slug. With
  the style `"UID"` it returns `length` random characters. These are taken
  from `CHARS_SMALL`, or from `CHARS_CAPITAL` when capitals are allowed.
  `CHARS_CAPITAL` is mixed case and leaves out `I`, `O`, `l` and `0`. With any
  other style it returns an adjective-name pair such as `"brave-turing"`,
  built from `ADJECTIVES` and `NAMES`.

### `linkshort.links`

This module holds the request-level operations.

- `add_link(db, request, settings, using_public_mode)` takes a JSON request
  body with a required `"longlink"` and an optional `"shortlink"` and
  `"expiry_delay"` (in seconds). It returns a `CreatedLink` with the fields
  `shortlink` and `expiry_time`.
  - If no slug is given, one is generated from the `LinkSettings`.
  - In public mode with a positive `public_mode_expiry_delay`, that delay is
    used when none is given. Otherwise the given delay is capped at it.
  - The delay is always limited to the range from `0` to five years
    (`MAX_EXPIRY_DELAY`).
  - If a generated `"UID"` slug collides with an existing one and
    `try_longer_slug` is set, one retry is made with a slug four characters
    longer.
- `get_longurl(db, shortlink, needhits, allow_capital_letters)` works like
  `database.find_url`, but returns `None` for a slug that is not valid.
- `getall_json(db)` returns every unexpired link as a compact JSON array.
- `delete_link(db, shortlink, allow_capital_letters)` deletes a valid slug and
  returns whether it existed.

`LinkSettings` is a frozen dataclass with these fields:

| Field | Default |
| --- | --- |
| `slug_style` | `"Pair"` |
| `slug_length` | `8` |
| `allow_capital_letters` | `False` |
| `public_mode_expiry_delay` | `0` |
| `try_longer_slug` | `False` |

`add_link` raises `LinkError` when a request is rejected. Its `reason`
attribute, which is also the exception message, is one of the following:

- `"Invalid request!"`
- `"Short URL is not valid!"`
- `"Short URL is already in use!"`
- `"Something went wrong!"`
- `"Something went very wrong!"`
- `"Something went extremely wrong!"`

## Example

```python
from linkshort.database import find_url, open_db
from linkshort.links import LinkError, LinkSettings, add_link

db = open_db("urls.sqlite")
settings = LinkSettings()

created = add_link(db, '{"longlink": "https://example.com/some/long/page"}', settings, False)
print(created.shortlink, created.expiry_time)
print(find_url(db, created.shortlink, True))

try:
    add_link(db, '{"longlink": "https://example.com/", "shortlink": "Bad Slug"}', settings, False)
except LinkError as error:
    print(error.reason)  # Short URL is not valid!
```

## What it does not do

The package provides the storage and link operations only. It has no HTTP
server, no redirect handling, no login, session or API-key checks, no web
front end and no command-line program. It also does not run `cleanup` on a
schedule. Expired links are removed only when `cleanup` or `add_link` is
called; until then, lookups simply skip them.

## Running the tests

```
pip install "linkshort[test]"
pytest
```