"""Choice of which collectors to run."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

logger = logging.getLogger(__name__)

ALL = "all"
_EXPAND_NAMES = {ALL, "defaults"}


def remove_duplicates(names: Iterable[str]) -> list[str]:
    """Drop repeated names, keeping the first occurrence of each."""
    return list(dict.fromkeys(names))


def collectors_to_run(
    selected: Iterable[str],
    required: Sequence[str],
    optional: Sequence[str],
) -> list[str]:
    """Return the collectors to run: every required one plus the known selected ones.

    "all" and "defaults" (in any case) select every optional collector;
    unknown names are logged and ignored.
    """
    names = list(required)
    for name in selected:
        if name.casefold() in _EXPAND_NAMES:
            names.extend(optional)
        elif name in names:
            continue
        elif name in optional:
            names.append(name)
        else:
            logger.error("Unknown collector %s. Ignored", name)
    return remove_duplicates(names)