"""*.collection.yml parser."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from promptlib_cli.errors import ManifestFormatError
from promptlib_cli.globs import normalize_path
from promptlib_cli.models import CollectionManifest, ContentKind, DisplayOptions, ItemRef

logger = logging.getLogger(__name__)

ORDERINGS = ("alpha", "declared")


class ManifestLoader:
    """Parse collection manifests into CollectionManifest objects."""

    def load(self, path: Path, root: Path | None = None) -> CollectionManifest:
        """Read and parse a manifest file. Raises ManifestFormatError."""
        rel = _relative(path, root)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ManifestFormatError(rel, f"unreadable file ({e})") from e
        return self.parse(text, rel)

    def parse(self, text: str, source: str = "") -> CollectionManifest:
        """Parse manifest YAML text."""
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ManifestFormatError(source, str(e).replace("\n", " ")) from e

        if not isinstance(data, dict):
            raise ManifestFormatError(source, "top level must be a mapping")

        manifest_id = data.get("id")
        if not isinstance(manifest_id, str) or not manifest_id.strip():
            raise ManifestFormatError(source, "missing 'id'")

        tags = data.get("tags") or []
        if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
            raise ManifestFormatError(source, "'tags' must be a list of strings")

        manifest = CollectionManifest(
            id=manifest_id,
            name=str(data.get("name") or manifest_id),
            description=str(data.get("description") or ""),
            tags=list(tags),
            items=self._parse_items(data.get("items"), source),
            display=self._parse_display(data.get("display"), source),
            source_path=source,
        )
        logger.debug("Loaded manifest %s with %d items", manifest.id, len(manifest.items))
        return manifest

    def _parse_items(self, raw: Any, source: str) -> list[ItemRef]:
        if not isinstance(raw, list) or not raw:
            raise ManifestFormatError(source, "'items' must be a non-empty list")

        items: list[ItemRef] = []
        for index, entry in enumerate(raw):
            if not isinstance(entry, dict):
                raise ManifestFormatError(source, f"items[{index}] must be a mapping")
            item_path = entry.get("path")
            if not isinstance(item_path, str) or not item_path.strip():
                raise ManifestFormatError(source, f"items[{index}] is missing 'path'")
            kind_value = entry.get("kind")
            if kind_value is None:
                raise ManifestFormatError(source, f"items[{index}] is missing 'kind'")
            try:
                kind = ContentKind(str(kind_value))
            except ValueError:
                raise ManifestFormatError(
                    source, f"items[{index}] has unknown kind '{kind_value}'"
                ) from None
            items.append(ItemRef(path=normalize_path(item_path.strip()), kind=kind))
        return items

    def _parse_display(self, raw: Any, source: str) -> DisplayOptions:
        if raw is None:
            return DisplayOptions()
        if not isinstance(raw, dict):
            raise ManifestFormatError(source, "'display' must be a mapping")

        ordering = raw.get("ordering", "declared")
        if ordering not in ORDERINGS:
            raise ManifestFormatError(
                source, f"display.ordering must be 'alpha' or 'declared', got '{ordering}'"
            )
        show_badge = raw.get("show_badge", False)
        if not isinstance(show_badge, bool):
            raise ManifestFormatError(source, "display.show_badge must be a boolean")
        return DisplayOptions(ordering=ordering, show_badge=show_badge)


def _relative(path: Path, root: Path | None) -> str:
    if root is None:
        return path.as_posix()
    try:
        return path.resolve().relative_to(root.resolve()).as_posix()
    except ValueError:
        return path.as_posix()
