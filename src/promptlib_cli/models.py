"""Data classes for promptlib-cli. Structured data, no business logic."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Any


SUFFIXES: dict[str, str] = {
    ".prompt.md": "prompt",
    ".instructions.md": "instruction",
    ".agent.md": "agent",
}

MANIFEST_SUFFIX = ".collection.yml"


class ContentKind(str, Enum):
    """The three kinds of content file in a prompt library."""

    PROMPT = "prompt"
    INSTRUCTION = "instruction"
    AGENT = "agent"

    @classmethod
    def from_path(cls, path: str | Path) -> ContentKind | None:
        """Infer the kind from the filename suffix, or None if unrecognised."""
        name = PurePosixPath(str(path).replace("\\", "/")).name
        for suffix, kind in SUFFIXES.items():
            if name.endswith(suffix) and len(name) > len(suffix):
                return cls(kind)
        return None

    @property
    def suffix(self) -> str:
        return {kind: suffix for suffix, kind in SUFFIXES.items()}[self.value]


@dataclass
class ContentFile:
    """A prompt, instruction or agent file."""

    path: str
    kind: ContentKind
    front_matter: dict[str, Any] = field(default_factory=dict)
    body: str = ""

    @property
    def name(self) -> str:
        filename = PurePosixPath(self.path).name
        return filename[: -len(self.kind.suffix)]

    @property
    def description(self) -> str:
        return str(self.front_matter.get("description", "") or "")

    @property
    def apply_to(self) -> str:
        return str(self.front_matter.get("applyTo", "") or "")

    @property
    def agent(self) -> str:
        return str(self.front_matter.get("agent", "") or "")

    @property
    def tools(self) -> list[str]:
        tools = self.front_matter.get("tools") or []
        return [str(t) for t in tools] if isinstance(tools, list) else []


@dataclass
class ItemRef:
    """A manifest's reference to a content file."""

    path: str
    kind: ContentKind


@dataclass
class DisplayOptions:
    """Presentation hints for a collection."""

    ordering: str = "declared"  # "alpha" or "declared"
    show_badge: bool = False


@dataclass
class CollectionManifest:
    """A parsed *.collection.yml file."""

    id: str
    name: str
    description: str = ""
    tags: list[str] = field(default_factory=list)
    items: list[ItemRef] = field(default_factory=list)
    display: DisplayOptions = field(default_factory=DisplayOptions)
    source_path: str = ""


@dataclass
class ValidationIssue:
    """One problem found while validating the library."""

    path: str
    code: str
    message: str
    severity: str = "error"  # "error" or "warning"

    def sort_key(self) -> tuple[str, str, str]:
        return (self.path, self.code, self.message)

    def to_dict(self) -> dict[str, str]:
        return {
            "path": self.path,
            "code": self.code,
            "message": self.message,
            "severity": self.severity,
        }


@dataclass
class ValidationReport:
    """Result of validating a whole library."""

    issues: list[ValidationIssue] = field(default_factory=list)
    files_checked: int = 0
    manifests_checked: int = 0

    @property
    def errors(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == "error"]

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == "warning"]

    @property
    def ok(self) -> bool:
        return not self.errors

    def by_path(self) -> dict[str, list[ValidationIssue]]:
        grouped: dict[str, list[ValidationIssue]] = {}
        for issue in self.issues:
            grouped.setdefault(issue.path, []).append(issue)
        return grouped

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "files_checked": self.files_checked,
            "manifests_checked": self.manifests_checked,
            "errors": len(self.errors),
            "warnings": len(self.warnings),
            "issues": [i.to_dict() for i in self.issues],
        }


@dataclass
class LintSettings:
    """Lint settings loaded from YAML config."""

    root: str = "."
    exclude_patterns: list[str] = field(default_factory=list)
    required_fields: dict[str, list[str]] = field(default_factory=dict)
    content_dirs: list[str] = field(
        default_factory=lambda: ["prompts", "instructions", "agents"]
    )
    strict: bool = False
    warn_unknown_markdown: bool = True
    log_level: str = "WARNING"
