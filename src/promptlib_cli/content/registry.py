"""Content discovery and registry."""

from __future__ import annotations

import fnmatch
import logging
from pathlib import Path

from promptlib_cli.content.loader import ContentLoader
from promptlib_cli.globs import matches, normalize_path
from promptlib_cli.models import MANIFEST_SUFFIX, ContentFile, ContentKind, LintSettings

logger = logging.getLogger(__name__)


class ContentRegistry:
    """Discover and index the content files and manifests under a library root.

    Files are indexed by their POSIX path relative to the root. Files and
    directories matching ``exclude_patterns`` are skipped.
    """

    def __init__(self, root: Path | str, settings: LintSettings | None = None) -> None:
        self._root = Path(root)
        self._settings = settings or LintSettings()
        self._loader = ContentLoader(self._settings.required_fields)
        self._kinds: dict[str, ContentKind] = {}
        self._manifests: list[str] = []
        self._other_markdown: list[str] = []
        self._cache: dict[str, ContentFile] = {}
        self._discover()

    @property
    def root(self) -> Path:
        return self._root

    @property
    def loader(self) -> ContentLoader:
        return self._loader

    def _is_excluded(self, rel: str) -> bool:
        name = rel.rsplit("/", 1)[-1]
        for pattern in self._settings.exclude_patterns:
            if fnmatch.fnmatch(rel, pattern) or fnmatch.fnmatch(name, pattern):
                return True
        return False

    def _discover(self) -> None:
        """Walk the root once, sorted, so results are deterministic."""
        if not self._root.is_dir():
            logger.warning("Library root %s is not a directory", self._root)
            return

        for path in sorted(self._root.rglob("*")):
            rel = path.relative_to(self._root).as_posix()
            parts = rel.split("/")
            if any(self._is_excluded("/".join(parts[: i + 1])) for i in range(len(parts))):
                continue
            if not path.is_file():
                continue

            kind = ContentKind.from_path(rel)
            if kind is not None:
                self._kinds[rel] = kind
            elif rel.endswith(MANIFEST_SUFFIX):
                self._manifests.append(rel)
            elif rel.endswith(".md"):
                self._other_markdown.append(rel)

        logger.debug(
            "Discovered %d content files and %d manifests under %s",
            len(self._kinds),
            len(self._manifests),
            self._root,
        )

    def known_kinds(self) -> dict[str, ContentKind]:
        """Map of relative path to inferred kind."""
        return dict(self._kinds)

    def content_paths(self, kind: ContentKind | None = None) -> list[str]:
        return [p for p, k in self._kinds.items() if kind is None or k is kind]

    def manifest_paths(self) -> list[str]:
        return list(self._manifests)

    def unrecognized_markdown(self) -> list[str]:
        """*.md files inside configured content dirs that have no known suffix."""
        dirs = tuple(d.strip("/") + "/" for d in self._settings.content_dirs)
        return [
            p for p in self._other_markdown if any(f"/{d}" in f"/{p}" for d in dirs)
        ]

    def get(self, path: str) -> ContentFile | None:
        """Load a content file by relative path. None if not indexed or invalid."""
        rel = normalize_path(path)
        if rel not in self._kinds:
            return None
        if rel not in self._cache:
            content, problems = self._loader.check(self._root / rel, self._root)
            if content is None:
                logger.debug("Skipping %s: %s", rel, problems[0])
                return None
            self._cache[rel] = content
        return self._cache[rel]

    def list_files(self, kind: ContentKind | None = None) -> list[ContentFile]:
        """All loadable content files, optionally filtered by kind."""
        files: list[ContentFile] = []
        for rel in self.content_paths(kind):
            content = self.get(rel)
            if content is not None:
                files.append(content)
        return files

    def instructions_for(self, target: str) -> list[ContentFile]:
        """Instruction files whose applyTo glob matches ``target``."""
        target = normalize_path(target)
        found: list[ContentFile] = []
        for content in self.list_files(ContentKind.INSTRUCTION):
            try:
                if matches(content.apply_to, target):
                    found.append(content)
            except ValueError:
                logger.debug("Ignoring invalid applyTo in %s", content.path)
        return found
