"""Random identifiers for players and their persistence on disk."""

from __future__ import annotations

import os
import secrets

from .logger import Logger

_DASH_BEFORE_BYTE = frozenset({4, 6, 8, 10})
_RECORD_SIZE = 37


def generate_uuid() -> str:
    """Return 32 random hex digits grouped 8-4-4-4-12."""
    groups = []
    for index in range(16):
        if index in _DASH_BEFORE_BYTE:
            groups.append("-")
        groups.append(secrets.token_hex(1))
    return "".join(groups)


def load_or_create_uuid(path: str | os.PathLike) -> str:
    """Read the identifier stored at ``path``, creating and storing one if absent.

    The file holds the identifier followed by a NUL byte.
    """
    logger = Logger("Engine")
    if os.path.exists(path):
        try:
            with open(path, "rb") as handle:
                raw = handle.read(_RECORD_SIZE)
        except OSError as exc:
            try:
                logger.error("Could not identify self.")
            except Exception as err:
                raise err from exc
        return raw.split(b"\0", 1)[0].decode("ascii", errors="replace")

    uuid = generate_uuid()
    try:
        with open(path, "wb") as handle:
            handle.write(uuid.encode("ascii") + b"\0")
    except OSError as exc:
        try:
            logger.error("Could not identify self.")
        except Exception as err:
            raise err from exc
    return uuid