"""*.prompt.md / *.instructions.md / *.agent.md parser with front-matter checks."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

import yaml

from promptlib_cli.errors import (
    InvalidFieldError,
    InvalidFrontMatterError,
    LibraryError,
    MissingFrontMatterError,
    MissingRequiredFieldError,
    UnknownKindError,
)
from promptlib_cli.globs import validate_glob
from promptlib_cli.models import ContentFile, ContentKind

logger = logging.getLogger(__name__)

_FRONTMATTER_PATTERN = re.compile(
    r"\A---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)(.*)",
    re.DOTALL | re.MULTILINE,
)

BASE_REQUIRED: dict[ContentKind, tuple[str, ...]] = {
    ContentKind.PROMPT: ("description",),
    ContentKind.INSTRUCTION: ("description", "applyTo"),
    ContentKind.AGENT: ("description",),
}


def split_front_matter(text: str, path: str = "") -> tuple[str, str]:
    """Return (raw front matter, body). Raises MissingFrontMatterError."""
    text = text.lstrip("\ufeff")
    match = _FRONTMATTER_PATTERN.match(text)
    if not match:
        raise MissingFrontMatterError(path)
    return match.group(1), match.group(2)


def parse_front_matter(text: str, path: str = "") -> dict[str, Any]:
    """Decode the leading YAML block of ``text`` into a mapping."""
    raw, _body = split_front_matter(text, path)
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise InvalidFrontMatterError(path, str(e).replace("\n", " ")) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidFrontMatterError(
            path, f"expected a mapping, got {type(data).__name__}"
        )
    return data


def required_fields(
    kind: ContentKind, extra: dict[str, list[str]] | None = None
) -> list[str]:
    """Base required fields for ``kind`` plus any configured extras."""
    fields = list(BASE_REQUIRED[kind])
    for name in (extra or {}).get(kind.value, []):
        if name not in fields:
            fields.append(name)
    return fields


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def validate_front_matter(
    front_matter: dict[str, Any],
    kind: ContentKind,
    path: str = "",
    required: dict[str, list[str]] | None = None,
) -> list[LibraryError]:
    """Return every problem with ``front_matter`` for a file of ``kind``."""
    problems: list[LibraryError] = []

    for name in required_fields(kind, required):
        if _is_blank(front_matter.get(name)):
            problems.append(MissingRequiredFieldError(name, path))

    apply_to = front_matter.get("applyTo")
    if kind is ContentKind.INSTRUCTION and not _is_blank(apply_to):
        if not isinstance(apply_to, str):
            problems.append(
                InvalidFieldError("applyTo", "must be a glob pattern string", path)
            )
        else:
            try:
                validate_glob(apply_to)
            except ValueError as e:
                problems.append(InvalidFieldError("applyTo", str(e), path))

    if "tools" in front_matter:
        tools = front_matter["tools"]
        if not isinstance(tools, list) or not all(isinstance(t, str) for t in tools):
            problems.append(
                InvalidFieldError("tools", "must be a list of strings", path)
            )

    for name in ("description", "agent"):
        value = front_matter.get(name)
        if value is not None and not isinstance(value, str):
            problems.append(InvalidFieldError(name, "must be a string", path))

    return problems


class ContentLoader:
    """Load content files from a library root."""

    def __init__(self, required: dict[str, list[str]] | None = None) -> None:
        self._required = required or {}

    def check(
        self, path: Path, root: Path
    ) -> tuple[ContentFile | None, list[LibraryError]]:
        """Parse and validate one file, collecting every problem."""
        rel = _relative(path, root)
        kind = ContentKind.from_path(rel)
        if kind is None:
            return None, [UnknownKindError(rel)]

        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read %s: %s", path, e)
            return None, [InvalidFrontMatterError(rel, f"unreadable file ({e})")]

        try:
            front_matter = parse_front_matter(text, rel)
        except LibraryError as e:
            return None, [e]

        _raw, body = split_front_matter(text, rel)
        problems = validate_front_matter(front_matter, kind, rel, self._required)
        logger.debug("Parsed %s (%s): %d problem(s)", rel, kind.value, len(problems))
        content = ContentFile(
            path=rel, kind=kind, front_matter=front_matter, body=body.strip()
        )
        return content, problems

    def load(self, path: Path, root: Path) -> ContentFile:
        """Load one file; raises the first validation problem."""
        content, problems = self.check(path, root)
        if problems:
            raise problems[0]
        assert content is not None
        return content


def _relative(path: Path, root: Path) -> str:
    try:
        return path.resolve().relative_to(root.resolve()).as_posix()
    except ValueError:
        return path.as_posix()
