"""Content system: front-matter loader, registry."""

from promptlib_cli.content.loader import (
    ContentLoader,
    parse_front_matter,
    split_front_matter,
    validate_front_matter,
)
from promptlib_cli.content.registry import ContentRegistry

__all__ = [
    "ContentLoader",
    "ContentRegistry",
    "parse_front_matter",
    "split_front_matter",
    "validate_front_matter",
]
