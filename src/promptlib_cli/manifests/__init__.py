"""Collection manifests: loader, resolver."""

from promptlib_cli.manifests.loader import ManifestLoader
from promptlib_cli.manifests.resolver import CollectionResolver

__all__ = ["ManifestLoader", "CollectionResolver"]
