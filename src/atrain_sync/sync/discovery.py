"""Recursive discovery of audio inputs in a source tree."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from atrain_sync.sync.models import InputItem

logger = logging.getLogger(__name__)


def discover_audio_files(source_dir: Path, extensions: tuple[str, ...]) -> list[InputItem]:
    """Return audio files under `source_dir` in stable, name-sorted walk order.

    Paths are absolute because the engine records the absolute path it was
    given, and the locator matches on that value.
    """

    wanted = {extension.lower() for extension in extensions}
    items: list[InputItem] = []
    _walk(source_dir.resolve(), wanted, items, visited=set())
    return items


def _walk(
    directory: Path,
    wanted: set[str],
    items: list[InputItem],
    *,
    visited: set[tuple[int, int]],
) -> None:
    try:
        stat = directory.stat()
    except OSError as error:
        logger.warning("Skipping unreadable directory %s: %s", directory, error)
        return
    # Symlinked directories are followed, each physical directory once.
    identity = (stat.st_dev, stat.st_ino)
    if identity in visited:
        logger.debug("Skipping already visited directory %s", directory)
        return
    visited.add(identity)

    try:
        with os.scandir(directory) as iterator:
            entries = sorted(iterator, key=lambda entry: entry.name)
    except OSError as error:
        logger.warning("Skipping unreadable directory %s: %s", directory, error)
        return

    for entry in entries:
        path = Path(entry.path)
        if entry.is_dir():
            _walk(path, wanted, items, visited=visited)
        elif entry.is_file() and path.suffix[1:].lower() in wanted:
            items.append(InputItem(path=path))
