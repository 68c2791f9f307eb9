"""User storage in SQLite."""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Iterable

logger = logging.getLogger(__name__)

PHOTO_SEPARATOR = "; "

_SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    username TEXT NOT NULL DEFAULT '',
    password TEXT NOT NULL DEFAULT '',
    email TEXT NOT NULL UNIQUE,
    gender TEXT NOT NULL DEFAULT '',
    age INTEGER NOT NULL DEFAULT 0,
    height INTEGER NOT NULL DEFAULT 0,
    weight INTEGER NOT NULL DEFAULT 0,
    languages TEXT NOT NULL DEFAULT '',
    profess TEXT NOT NULL DEFAULT '',
    country TEXT NOT NULL DEFAULT '',
    descript TEXT NOT NULL DEFAULT '',
    photos TEXT NOT NULL DEFAULT '',
    phon TEXT NOT NULL DEFAULT '',
    linkavatar TEXT NOT NULL DEFAULT ''
)
"""


@dataclass
class User:
    """A member of the site."""

    id: int = 0
    username: str = ""
    password: str = ""
    email: str = ""
    gender: str = ""
    age: int = 0
    height: int = 0
    weight: int = 0
    languages: str = ""
    profess: str = ""
    country: str = ""
    descript: str = ""
    photos: str = ""


_INT_FIELDS = {"id", "age", "height", "weight"}
_UPDATABLE_COLUMNS = {f.name for f in fields(User)} - {"id"} | {"phon", "linkavatar"}


def _to_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _row_to_user(row: sqlite3.Row) -> User:
    columns = {name.lower(): row[name] for name in row.keys()}
    values = {}
    for field in fields(User):
        if field.name not in columns:
            continue
        value = columns[field.name]
        if field.name in _INT_FIELDS:
            values[field.name] = _to_int(value)
        else:
            values[field.name] = "" if value is None else str(value)
    return User(**values)


def set_avatar(gender: str, photo: str) -> str:
    """Return ``photo``, or a blank avatar matching ``gender`` when it is empty."""
    if photo:
        return photo
    if gender == "m":
        return "bman.jpg"
    if gender == "f":
        return "bwoman.jpg"
    return ""


def filter_empty(items: Iterable[str]) -> list[str]:
    """Return the non-empty strings of ``items``."""
    return [item for item in items if item]


class Database:
    """Queries and updates on the users table."""

    def __init__(self, path: str = "social.db") -> None:
        self.path = path
        self.connection = sqlite3.connect(path)
        self.connection.row_factory = sqlite3.Row
        with self.connection:
            self.connection.execute(_SCHEMA)

    def __enter__(self) -> Database:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def recent_users(self) -> list[User]:
        """Return every user with id, name, e-mail, photos and gender."""
        rows = self.connection.execute(
            "SELECT id, username, email, photos, gender FROM users"
        ).fetchall()
        return [_row_to_user(row) for row in rows]

    def profile_info(self, userid: int) -> User:
        """Return the full record of a user, or an empty User."""
        row = self.connection.execute("SELECT * FROM users WHERE id = ?", (userid,)).fetchone()
        return _row_to_user(row) if row is not None else User()

    def user_info(self, userid: int) -> User:
        """Return a user with only the first photo kept, or an empty User."""
        row = self.connection.execute("SELECT * FROM users WHERE id = ?", (userid,)).fetchone()
        if row is None:
            logger.info("no user with id %s", userid)
            return User()
        user = _row_to_user(row)
        user.photos = user.photos.split(PHOTO_SEPARATOR)[0]
        return user

    def insert_user(self, email: str, password: str, gender: str) -> None:
        """Register a new user; raises sqlite3.IntegrityError on a taken e-mail."""
        with self.connection:
            self.connection.execute(
                "INSERT INTO users(email, password, gender) VALUES (?, ?, ?)",
                (email, password, gender),
            )

    def select_user(self, email: str) -> tuple[int, str, str]:
        """Return ``(id, username, password)`` for ``email``, or ``(-1, "", "")``."""
        row = self.connection.execute(
            "SELECT id, username, password FROM users WHERE email = ?", (email,)
        ).fetchone()
        if row is None:
            logger.info("select user: no user for %s", email)
            return -1, "", ""
        return row["id"], row["username"], row["password"]

    def update_photos(self, photos: str, userid: int) -> None:
        """Store the photo list of a user."""
        with self.connection:
            self.connection.execute("UPDATE users SET photos = ? WHERE id = ?", (photos, userid))

    def user_photos(self, userid: int) -> list[str]:
        """Return the non-empty photo names of a user."""
        row = self.connection.execute(
            "SELECT photos FROM users WHERE id = ?", (userid,)
        ).fetchone()
        if row is None:
            return []
        return filter_empty(row["photos"].split(PHOTO_SEPARATOR))

    def update_user_info(self, field: str, userid: int) -> None:
        """Set column ``field`` of a user to the column's own name."""
        if field not in _UPDATABLE_COLUMNS:
            raise ValueError(f"unknown column: {field!r}")
        with self.connection:
            self.connection.execute(
                f"UPDATE users SET {field} = ? WHERE id = ?", (field, userid)
            )

    def update_account(
        self,
        userid: int,
        username: str,
        age: Any,
        profess: str,
        descript: str,
        country: str,
    ) -> None:
        """Update the editable profile fields of a user."""
        with self.connection:
            self.connection.execute(
                "UPDATE users SET username = ?, age = ?, profess = ?, descript = ?, country = ? "
                "WHERE id = ?",
                (username, _to_int(age), profess, descript, country, userid),
            )

    def _contact(self, userid: int) -> tuple[str, str, str, str]:
        row = self.connection.execute(
            "SELECT username, email, phon, linkavatar FROM users WHERE id = ?", (userid,)
        ).fetchone()
        if row is None:
            logger.info("no result for user %s", userid)
            return "", "", "", ""
        return row["username"], row["email"], row["phon"], row["linkavatar"]

    def get_one_user(self, userid: int) -> tuple[str, str, str, str]:
        """Return ``(username, email, phon, linkavatar)``, empty strings when missing."""
        return self._contact(userid)

    def update_contact(self, name: str, email: str, phon: str, userid: int) -> int:
        """Update name, e-mail and phone of a user; return the rows affected."""
        with self.connection:
            cursor = self.connection.execute(
                "UPDATE users SET username = ?, email = ?, phon = ? WHERE id = ?",
                (name, email, phon, userid),
            )
        logger.debug("affected rows: %s", cursor.rowcount)
        return cursor.rowcount

    def select_messages(self, userid: int) -> tuple[str, str, str, str]:
        """Return the contact details shown on the messages page."""
        return self._contact(userid)

    def create_database(self, name: str) -> None:
        """Attach a database named ``name`` unless it is already attached."""
        if not name.isidentifier():
            raise ValueError(f"invalid database name: {name!r}")
        attached = {row["name"] for row in self.connection.execute("PRAGMA database_list")}
        if name in attached:
            return
        if self.path == ":memory:":
            target = ":memory:"
        else:
            target = str(Path(self.path).with_name(f"{name}.db"))
        self.connection.execute(f"ATTACH DATABASE ? AS {name}", (target,))

    def close(self) -> None:
        """Close the connection."""
        self.connection.close()


def connect_db(path: str = "social.db") -> Database:
    """Open (and create if needed) the users database at ``path``."""
    return Database(path)