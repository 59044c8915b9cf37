"""applyTo glob patterns: syntax checks and path matching.

An ``applyTo`` value is one glob or several joined by commas, e.g.
``"**/*.py, **/*.ipynb"``. Supported syntax:

- ``**``      any number of path segments (including none)
- ``*``       any run of characters within one segment
- ``?``       one character within a segment
- ``[...]``   a character class, ``[!...]`` negated
- ``{a,b}``   alternation
- ``\\x``     a literal ``x``
"""

from __future__ import annotations

import re
from functools import lru_cache


def split_patterns(pattern: str) -> list[str]:
    """Split on top-level commas; commas inside {...} belong to alternation."""
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    i = 0
    while i < len(pattern):
        ch = pattern[i]
        if ch == "\\" and i + 1 < len(pattern):
            current.append(pattern[i : i + 2])
            i += 2
            continue
        if ch == "{":
            depth += 1
        elif ch == "}" and depth:
            depth -= 1
        elif ch == "," and depth == 0:
            parts.append("".join(current).strip())
            current = []
            i += 1
            continue
        current.append(ch)
        i += 1
    parts.append("".join(current).strip())
    return parts


def _check_single(pattern: str) -> None:
    if not pattern:
        raise ValueError("empty pattern")

    braces = 0
    i = 0
    while i < len(pattern):
        ch = pattern[i]
        if ch == "\\":
            if i + 1 >= len(pattern):
                raise ValueError(f"dangling escape at end of '{pattern}'")
            i += 2
            continue
        if ch == "[":
            end = _class_end(pattern, i)
            if end is None:
                raise ValueError(f"unclosed '[' in '{pattern}'")
            if end == i + 1 or (end == i + 2 and pattern[i + 1] == "!"):
                raise ValueError(f"empty character class in '{pattern}'")
            i = end + 1
            continue
        if ch == "]":
            raise ValueError(f"unmatched ']' in '{pattern}'")
        if ch == "{":
            braces += 1
        elif ch == "}":
            braces -= 1
            if braces < 0:
                raise ValueError(f"unmatched '}}' in '{pattern}'")
        i += 1

    if braces:
        raise ValueError(f"unclosed '{{' in '{pattern}'")


def _class_end(pattern: str, start: int) -> int | None:
    """Index of the ']' closing the class opened at ``start``."""
    j = start + 1
    while j < len(pattern):
        if pattern[j] == "\\":
            j += 2
            continue
        if pattern[j] == "]":
            return j
        j += 1
    return None


def validate_glob(pattern: str) -> None:
    """Raise ValueError if ``pattern`` is not a usable applyTo value."""
    if not isinstance(pattern, str) or not pattern.strip():
        raise ValueError("pattern is empty")
    for part in split_patterns(pattern):
        glob_to_regex(part)


def is_valid_glob(pattern: str) -> bool:
    try:
        validate_glob(pattern)
    except ValueError:
        return False
    return True


def _translate(pattern: str) -> str:
    out: list[str] = []
    i = 0
    n = len(pattern)
    while i < n:
        ch = pattern[i]
        if ch == "\\" and i + 1 < n:
            out.append(re.escape(pattern[i + 1]))
            i += 2
        elif ch == "*":
            if i + 1 < n and pattern[i + 1] == "*":
                # '**/' matches zero or more whole segments
                if i + 2 < n and pattern[i + 2] == "/":
                    out.append("(?:.*/)?")
                    i += 3
                else:
                    out.append(".*")
                    i += 2
            else:
                out.append("[^/]*")
                i += 1
        elif ch == "?":
            out.append("[^/]")
            i += 1
        elif ch == "[":
            end = _class_end(pattern, i)
            body = pattern[i + 1 : end]
            negate = body.startswith("!")
            if negate:
                body = body[1:]
            if body.startswith("^"):
                body = "\\" + body
            out.append(f"[{'^' if negate else ''}{body}]")
            i = end + 1
        elif ch == "{":
            depth = 1
            j = i + 1
            while j < n and depth:
                if pattern[j] == "\\":
                    j += 2
                    continue
                if pattern[j] == "{":
                    depth += 1
                elif pattern[j] == "}":
                    depth -= 1
                j += 1
            options = split_patterns(pattern[i + 1 : j - 1])
            out.append("(?:" + "|".join(_translate(o) for o in options) + ")")
            i = j
        else:
            out.append(re.escape(ch))
            i += 1
    return "".join(out)


@lru_cache(maxsize=256)
def glob_to_regex(pattern: str) -> re.Pattern[str]:
    """Compile a single glob (no top-level commas) to an anchored regex."""
    _check_single(pattern)
    try:
        return re.compile(rf"\A{_translate(pattern)}\Z")
    except re.error as e:
        # e.g. a reversed range such as [z-a]
        raise ValueError(f"invalid pattern '{pattern}': {e.msg}") from e


def matches(pattern: str, path: str) -> bool:
    """True if any comma-separated entry of ``pattern`` matches ``path``."""
    target = normalize_path(path)
    for part in split_patterns(pattern):
        if part and glob_to_regex(part).match(target):
            return True
    return False


def normalize_path(path: str) -> str:
    """POSIX separators, no leading './'."""
    target = path.replace("\\", "/")
    while target.startswith("./"):
        target = target[2:]
    return target
