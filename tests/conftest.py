"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest
import yaml

from promptlib_cli.config import ConfigManager
from promptlib_cli.models import LintSettings


def write(root: Path, rel: str, text: str) -> Path:
    """Write ``text`` to root/rel, creating parent directories."""
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


@pytest.fixture
def settings() -> LintSettings:
    return LintSettings(exclude_patterns=[".git", "node_modules"])


@pytest.fixture
def mock_config(tmp_path: Path) -> ConfigManager:
    """Create a ConfigManager with test overrides."""
    settings_path = tmp_path / "settings.yaml"
    settings_path.write_text(
        yaml.dump({"strict": False, "exclude_patterns": [".git", "build"]})
    )
    return ConfigManager(config_path=str(settings_path))


@pytest.fixture
def library(tmp_path: Path) -> Path:
    """Create a small, fully valid prompt library."""
    root = tmp_path / "library"
    write(
        root,
        "prompts/sql-optimize.prompt.md",
        "---\n"
        'agent: "ask"\n'
        'description: "Review a SQL query and suggest optimizations."\n'
        "---\n\n"
        "# SQL Optimization\n\nLook for missing indexes.\n",
    )
    write(
        root,
        "prompts/etl-review.prompt.md",
        "---\n"
        'agent: "agent"\n'
        'description: "Review an ETL pipeline for data quality checks."\n'
        "---\n\n"
        "Check every stage for validation.\n",
    )
    write(
        root,
        "instructions/python.instructions.md",
        "---\n"
        'description: "Python coding conventions for analytics code."\n'
        'applyTo: "**/*.py"\n'
        "---\n\n"
        "Use type hints.\n",
    )
    write(
        root,
        "instructions/notebooks.instructions.md",
        "---\n"
        'description: "Notebook hygiene."\n'
        'applyTo: "**/*.ipynb, notebooks/**"\n'
        "---\n\n"
        "Clear outputs before committing.\n",
    )
    write(
        root,
        "agents/gxp-validator.agent.md",
        "---\n"
        'description: "GxP computerized system validation expert."\n'
        "tools: ['codebase', 'search']\n"
        "---\n\n"
        "You are a validation specialist.\n",
    )
    write(
        root,
        "collections/data-engineering.collection.yml",
        yaml.safe_dump(
            {
                "id": "data-engineering",
                "name": "Data Engineering",
                "description": "Prompts and guidelines for pipelines.",
                "tags": ["etl", "sql"],
                "items": [
                    {"path": "prompts/sql-optimize.prompt.md", "kind": "prompt"},
                    {"path": "instructions/python.instructions.md", "kind": "instruction"},
                    {"path": "prompts/etl-review.prompt.md", "kind": "prompt"},
                ],
                "display": {"ordering": "alpha", "show_badge": True},
            },
            sort_keys=False,
        ),
    )
    return root


@pytest.fixture
def write_file() -> Callable[[Path, str, str], Path]:
    return write
