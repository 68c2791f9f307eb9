"""Building blocks for a small social site: user store, cookie sessions, templates and a pub/sub hub."""

__version__ = "0.1.0"