"""Completion ledger and work selection.

The destination directory is the only persisted state: a result file named
`<stem>.<result-extension>` marks that stem as done. Both functions are
recomputed from scratch on every run.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from atrain_sync.sync.models import InputItem

logger = logging.getLogger(__name__)


def load_completion_ledger(dest_dir: Path, result_extension: str) -> frozenset[str]:
    """Stems of result files directly inside `dest_dir`.

    Non-recursive. An unreadable directory yields an empty ledger so the run
    continues; directory existence is checked earlier at setup.
    """

    suffix = result_extension.lower()
    stems: set[str] = set()
    try:
        with os.scandir(dest_dir) as iterator:
            for entry in iterator:
                if not entry.is_file():
                    continue
                path = Path(entry.name)
                if path.suffix[1:].lower() == suffix:
                    stems.add(path.stem)
    except OSError as error:
        logger.warning("Could not read destination directory %s: %s", dest_dir, error)
        return frozenset()
    return frozenset(stems)


def select_pending(items: Iterable[InputItem], ledger: frozenset[str]) -> list[InputItem]:
    """Inputs whose stem has no result yet, in their original order."""

    return [item for item in items if item.stem not in ledger]
