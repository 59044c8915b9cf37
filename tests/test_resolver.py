"""Tests for the collection resolver."""

from __future__ import annotations

import pytest

from promptlib_cli.errors import DanglingReferenceError, KindMismatchError
from promptlib_cli.manifests.resolver import CollectionResolver
from promptlib_cli.models import (
    CollectionManifest,
    ContentKind,
    DisplayOptions,
    ItemRef,
)


KNOWN = {
    "prompts/x.prompt.md": ContentKind.PROMPT,
    "prompts/a.prompt.md": ContentKind.PROMPT,
    "agents/reviewer.agent.md": ContentKind.AGENT,
    "instructions/sql.instructions.md": ContentKind.INSTRUCTION,
}


def _manifest(*items: tuple[str, ContentKind], ordering: str = "declared") -> CollectionManifest:
    return CollectionManifest(
        id="test",
        name="Test",
        items=[ItemRef(path=p, kind=k) for p, k in items],
        display=DisplayOptions(ordering=ordering),
        source_path="collections/test.collection.yml",
    )


@pytest.fixture
def resolver() -> CollectionResolver:
    return CollectionResolver(KNOWN)


class TestCollectionResolver:
    def test_resolve_keeps_declared_order(self, resolver: CollectionResolver) -> None:
        manifest = _manifest(
            ("prompts/x.prompt.md", ContentKind.PROMPT),
            ("agents/reviewer.agent.md", ContentKind.AGENT),
            ("prompts/a.prompt.md", ContentKind.PROMPT),
        )
        resolved = resolver.resolve(manifest)
        assert [r.path for r in resolved] == [
            "prompts/x.prompt.md",
            "agents/reviewer.agent.md",
            "prompts/a.prompt.md",
        ]

    def test_kind_mismatch(self, resolver: CollectionResolver) -> None:
        manifest = _manifest(("prompts/x.prompt.md", ContentKind.AGENT))
        problems = resolver.problems(manifest)
        assert len(problems) == 1
        error = problems[0]
        assert isinstance(error, KindMismatchError)
        assert (error.path, error.expected, error.actual) == (
            "prompts/x.prompt.md",
            "agent",
            "prompt",
        )

    def test_dangling_reference(self, resolver: CollectionResolver) -> None:
        manifest = _manifest(("agents/missing.agent.md", ContentKind.AGENT))
        with pytest.raises(DanglingReferenceError) as exc:
            resolver.resolve(manifest)
        assert exc.value.path == "agents/missing.agent.md"
        assert exc.value.manifest == "collections/test.collection.yml"

    def test_reports_every_problem(self, resolver: CollectionResolver) -> None:
        manifest = _manifest(
            ("agents/missing.agent.md", ContentKind.AGENT),
            ("prompts/x.prompt.md", ContentKind.PROMPT),
            ("instructions/sql.instructions.md", ContentKind.PROMPT),
            ("prompts/gone.prompt.md", ContentKind.PROMPT),
        )
        problems = resolver.problems(manifest)
        assert [type(p).__name__ for p in problems] == [
            "DanglingReferenceError",
            "KindMismatchError",
            "DanglingReferenceError",
        ]

    def test_problems_is_pure(self, resolver: CollectionResolver) -> None:
        manifest = _manifest(("agents/missing.agent.md", ContentKind.AGENT))
        first = [str(p) for p in resolver.problems(manifest)]
        second = [str(p) for p in resolver.problems(manifest)]
        assert first == second

    def test_display_order_alpha(self) -> None:
        manifest = _manifest(
            ("prompts/x.prompt.md", ContentKind.PROMPT),
            ("agents/reviewer.agent.md", ContentKind.AGENT),
            ordering="alpha",
        )
        ordered = CollectionResolver.display_order(manifest)
        assert [r.path for r in ordered] == [
            "agents/reviewer.agent.md",
            "prompts/x.prompt.md",
        ]
        # Presentation order never changes the declared items
        assert manifest.items[0].path == "prompts/x.prompt.md"

    def test_display_order_declared(self) -> None:
        manifest = _manifest(
            ("prompts/x.prompt.md", ContentKind.PROMPT),
            ("agents/reviewer.agent.md", ContentKind.AGENT),
        )
        ordered = CollectionResolver.display_order(manifest)
        assert [r.path for r in ordered] == [
            "prompts/x.prompt.md",
            "agents/reviewer.agent.md",
        ]
