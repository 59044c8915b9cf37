"""Library-wide validation: every content file and every collection manifest."""

from __future__ import annotations

import logging
from pathlib import Path

from promptlib_cli.content.registry import ContentRegistry
from promptlib_cli.errors import LibraryError, ManifestFormatError
from promptlib_cli.manifests.loader import ManifestLoader
from promptlib_cli.manifests.resolver import CollectionResolver
from promptlib_cli.models import (
    CollectionManifest,
    LintSettings,
    ValidationIssue,
    ValidationReport,
)

logger = logging.getLogger(__name__)


def _issue(error: LibraryError, severity: str = "error") -> ValidationIssue:
    return ValidationIssue(
        path=error.path, code=error.code, message=error.detail, severity=severity
    )


class LibraryValidator:
    """Validate a prompt library rooted at ``root``.

    Never stops at the first problem: every offending file and field ends up
    in the report. Issues are sorted so repeated runs over an unchanged tree
    produce identical reports.
    """

    def __init__(
        self, root: Path | str, settings: LintSettings | None = None
    ) -> None:
        self._root = Path(root)
        self._settings = settings or LintSettings()
        self._registry = ContentRegistry(self._root, self._settings)
        self._manifest_loader = ManifestLoader()

    @property
    def registry(self) -> ContentRegistry:
        return self._registry

    def run(self) -> ValidationReport:
        report = ValidationReport()
        issues: list[ValidationIssue] = []

        for rel in self._registry.content_paths():
            _content, problems = self._registry.loader.check(
                self._root / rel, self._root
            )
            issues.extend(_issue(p) for p in problems)
            report.files_checked += 1

        if self._settings.warn_unknown_markdown:
            for rel in self._registry.unrecognized_markdown():
                issues.append(
                    ValidationIssue(
                        path=rel,
                        code="UnknownKindError",
                        message="markdown file has no .prompt.md, .instructions.md or .agent.md suffix",
                        severity="warning",
                    )
                )

        issues.extend(self._check_manifests(report))

        report.issues = sorted(issues, key=ValidationIssue.sort_key)
        logger.info(
            "Validated %d files and %d manifests: %d errors, %d warnings",
            report.files_checked,
            report.manifests_checked,
            len(report.errors),
            len(report.warnings),
        )
        return report

    def _check_manifests(self, report: ValidationReport) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        resolver = CollectionResolver(self._registry.known_kinds())
        seen_ids: dict[str, str] = {}

        for rel in self._registry.manifest_paths():
            report.manifests_checked += 1
            try:
                manifest = self._manifest_loader.load(self._root / rel, self._root)
            except ManifestFormatError as e:
                issues.append(_issue(e))
                continue

            if manifest.id in seen_ids:
                issues.append(
                    _issue(
                        ManifestFormatError(
                            rel,
                            f"duplicate id '{manifest.id}' (also in {seen_ids[manifest.id]})",
                        )
                    )
                )
            else:
                seen_ids[manifest.id] = rel

            for problem in resolver.problems(manifest):
                issue = _issue(problem)
                issue.message = f"{issue.message} (in {rel})"
                issues.append(issue)

            issues.extend(self._duplicate_items(manifest))
        return issues

    @staticmethod
    def _duplicate_items(manifest: CollectionManifest) -> list[ValidationIssue]:
        seen: set[str] = set()
        issues: list[ValidationIssue] = []
        for item in manifest.items:
            if item.path in seen:
                issues.append(
                    ValidationIssue(
                        path=manifest.source_path,
                        code="DuplicateItem",
                        message=f"'{item.path}' is listed more than once",
                        severity="warning",
                    )
                )
            seen.add(item.path)
        return issues


def exit_code(report: ValidationReport, strict: bool = False) -> int:
    """1 if the report fails (errors, or warnings under strict), else 0."""
    if report.errors:
        return 1
    if strict and report.warnings:
        return 1
    return 0
