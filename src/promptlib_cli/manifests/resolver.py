"""Collection resolver: check manifest items against the files that exist."""

from __future__ import annotations

from collections.abc import Mapping

from promptlib_cli.errors import DanglingReferenceError, KindMismatchError, LibraryError
from promptlib_cli.models import CollectionManifest, ContentKind, ItemRef


class CollectionResolver:
    """Resolve manifest item references against known content paths.

    ``known`` maps each content file's relative path to its inferred kind.
    Resolution never reads file contents; it is set membership plus a kind
    comparison.
    """

    def __init__(self, known: Mapping[str, ContentKind]) -> None:
        self._known = dict(known)

    def problems(self, manifest: CollectionManifest) -> list[LibraryError]:
        """Every dangling reference and kind mismatch, in declared order."""
        found: list[LibraryError] = []
        for item in manifest.items:
            actual = self._known.get(item.path)
            if actual is None:
                found.append(DanglingReferenceError(item.path, manifest.source_path))
            elif actual is not item.kind:
                found.append(
                    KindMismatchError(
                        item.path, item.kind.value, actual.value, manifest.source_path
                    )
                )
        return found

    def resolve(self, manifest: CollectionManifest) -> list[ItemRef]:
        """Items in declared order. Raises the first problem if any."""
        problems = self.problems(manifest)
        if problems:
            raise problems[0]
        return list(manifest.items)

    @staticmethod
    def display_order(manifest: CollectionManifest) -> list[ItemRef]:
        """Presentation order: alphabetical by path for 'alpha', else declared."""
        if manifest.display.ordering == "alpha":
            return sorted(manifest.items, key=lambda item: item.path)
        return list(manifest.items)
