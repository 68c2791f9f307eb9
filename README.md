# socialsite

Building blocks for a small social web site on aiohttp and Jinja2:

- `socialsite.store` — an SQLite store of users
- `socialsite.auth` — sessions kept in an HMAC-signed cookie
- `socialsite.templates` — Jinja2 templates loaded from a directory
- `socialsite.pubsub` — a topic-based publish/subscribe hub for
  websocket connections

## Installing

```
pip install .
```

To run the tests as well:

```
pip install ".[test]"
pytest
```

## User store

`Database(path="social.db")` (or `connect_db(path)`) opens an SQLite
file and creates the `users` table if it is missing. It can be used as a
context manager, which closes the connection on exit.

```python
from socialsite.store import Database

password = "password"
with Database(":memory:") as db:
    db.insert_user("someone@example.com", password, "f")
    userid, username, stored = db.select_user("someone@example.com")
    db.update_account(userid, "someone", "30", "painter", "hello", "nowhere")
    db.update_photos("a.jpg; b.jpg; ", userid)
    print(db.user_photos(userid))      # ['a.jpg', 'b.jpg']
    print(db.user_info(userid).photos)  # 'a.jpg'
```

Other members:

- `recent_users()` returns every user as a `User` with id, username,
  email, photos and gender filled in.
- `profile_info(userid)` returns the full `User`, or an empty `User`.
- `select_user(email)` returns `(-1, "", "")` when nobody has that
  e-mail; `insert_user` raises `sqlite3.IntegrityError` for a taken one.
- `get_one_user(userid)` and `select_messages(userid)` return
  `(username, email, phon, linkavatar)`, empty strings when missing.
- `update_contact(name, email, phon, userid)` returns the number of rows
  changed.
- `update_user_info(field, userid)` sets the named column to the
  column's own name; an unknown column raises `ValueError`.
- `create_database(name)` attaches a database `<name>.db` next to the
  store file (in memory for an in-memory store) unless already attached.

`set_avatar(gender, photo)` returns the photo, or `bman.jpg` / `bwoman.jpg`
for gender `m` / `f` when the photo is empty. `filter_empty(items)` drops
empty strings.

## Sessions

`SessionStore(secret, cookie_name="session")` signs session values into
a cookie. `save(response, values, max_age)` sets the cookie (path `/`,
HttpOnly); `load(request)` returns the values, or `{}` when the cookie is
missing, tampered with or expired.

With a store placed in an aiohttp application under
`socialsite.auth.SESSION_STORE`:

- `new_session(request, response, username, userid)` starts a session
  lasting ten minutes;
- `get_session(request)` returns `(username, userid)` or raises
  `NoSessionError`.

## Templates and file locations

`Templates(directory)` loads every file under the directory (see
`list_files`) and renders them by base name with
`render(name, data)`; data that is not a mapping is exposed as `data`.
Autoescaping is on. A directory without files raises `ValueError`.

`photo_folder()` returns `../files/`. `assets_dir()` returns the
`SOCIALSITE_ASSETS` environment variable if set, else `assets` if that
directory exists, else `/root/social/assets`.

## Publish/subscribe

`Hub` keeps the subscribers of each topic in a thread-safe `Cache`.
`Hub.serve_messages(conn)` handles one aiohttp websocket. Each message is
a JSON object (parsed with `parse_event`):

```json
{"event": "subscribe", "channel": "lobby", "data": ""}
```

`event` is `subscribe`, `unsubscribe` or `message`. Subscriptions are
answered with `subscribe to lobby success!` (or `unsubscribe from ...`).
A `message` event sends `data` to every subscriber of the channel; a
sender not subscribed is told `should subscribe in 'lobby' channel
first`. Other messages are echoed back. When the connection ends it is
removed from every topic and closed.

## What is not included

The package has no web application, request handlers or routes, and no
command to start a server. The pieces above are meant to be wired into
an aiohttp application of your own.