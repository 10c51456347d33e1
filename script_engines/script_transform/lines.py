"""Line-level helpers for editing exported script text."""
from __future__ import annotations

import re
from typing import Iterable, List

from script_engines.script_transform.models import CommandKind

_NEXT_FLAG = re.compile(r"\s-next(?=\s|;|$)")


def split_lines(text: str) -> List[str]:
    """Non-blank lines of `text`, trimmed."""
    return [line.strip() for line in text.splitlines() if line.strip()]


def has_next_flag(line: str) -> bool:
    return bool(_NEXT_FLAG.search(line.strip()))


def toggle_next(line: str) -> str:
    """Add or remove the `-next` flag, keeping the `;` terminator in place."""
    stripped = line.strip()
    terminated = stripped.endswith(";")
    body = stripped[:-1].rstrip() if terminated else stripped

    if _NEXT_FLAG.search(body):
        body = _NEXT_FLAG.sub("", body).rstrip()
    else:
        body = f"{body} -next"

    return f"{body};" if terminated else body


def only_set_transform(lines: Iterable[str]) -> List[str]:
    prefix = CommandKind.SET_TRANSFORM.value
    return [line for line in lines if line.strip().startswith(prefix)]
