"""HTML templates and the site's file locations."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import jinja2

logger = logging.getLogger(__name__)


def list_files(directory: str) -> list[str]:
    """Return the files under ``directory``: its own first, then those of subdirectories."""
    try:
        with os.scandir(directory) as scan:
            entries = sorted(scan, key=lambda entry: entry.name)
    except OSError as exc:
        logger.error("%s", exc)
        return []
    files: list[str] = []
    nested: list[str] = []
    for entry in entries:
        path = f"{directory}/{entry.name}"
        if entry.is_dir():
            nested.extend(list_files(path))
        else:
            files.append(path)
    return files + nested


class Templates:
    """Every template file of a directory, looked up by base name."""

    def __init__(self, directory: str) -> None:
        paths = list_files(directory)
        if not paths:
            raise ValueError(f"no template files in {directory!r}")
        sources = {Path(path).name: Path(path).read_text(encoding="utf-8") for path in paths}
        self.environment = jinja2.Environment(
            loader=jinja2.DictLoader(sources), autoescape=True
        )

    def render(self, name: str, data: Any) -> str:
        """Render template ``name``; a non-mapping ``data`` is exposed as ``data``."""
        context = dict(data) if isinstance(data, Mapping) else {"data": data}
        return self.environment.get_template(name).render(context)


def photo_folder() -> str:
    """Directory where uploaded photos are stored."""
    return "../files/"


def assets_dir() -> str:
    """Directory of the static assets."""
    configured = os.environ.get("SOCIALSITE_ASSETS")
    if configured:
        return configured
    if Path("assets").is_dir():
        return "assets"
    return "/root/social/assets"