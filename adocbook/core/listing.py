"""Selection and ordering of listed repository files."""

import re
from typing import Iterable, List, Tuple

from .contents_client import RemoteFile


_NUMBER = re.compile(r"\d+")


def chapter_sort_key(name: str, prefix: str = "ch") -> Tuple[int, float, str]:
    """
    Order chapters by the first number after the prefix, then by name.

    Names without a number sort after numbered ones.
    """
    rest = name[len(prefix):] if name.startswith(prefix) else name
    match = _NUMBER.search(rest)
    if match:
        return (0, int(match.group()), name)
    return (1, float('inf'), name)


def select_chapters(entries: Iterable[RemoteFile], prefix: str = "ch", suffix: str = ".adoc") -> List[RemoteFile]:
    chapters = [e for e in entries if e.name.startswith(prefix) and e.name.endswith(suffix)]
    return sorted(chapters, key=lambda e: chapter_sort_key(e.name, prefix))


def select_all(entries: Iterable[RemoteFile]) -> List[RemoteFile]:
    return list(entries)
