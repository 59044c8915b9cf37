"""Exceptions raised while loading and validating a prompt library."""

from __future__ import annotations


class LibraryError(Exception):
    """Base class for every validation failure. Carries the offending path."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        self.detail = message
        super().__init__(f"{path}: {message}" if path else message)

    @property
    def code(self) -> str:
        return type(self).__name__


class MissingFrontMatterError(LibraryError):
    """A content file lacks a leading --- metadata block."""

    def __init__(self, path: str = "") -> None:
        super().__init__(path, "missing front matter (expected a leading '---' block)")


class InvalidFrontMatterError(LibraryError):
    """The metadata block is not valid YAML or not a mapping."""

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(path, f"invalid front matter: {detail}")


class MissingRequiredFieldError(LibraryError):
    """A required front-matter field is absent or blank."""

    def __init__(self, field: str, path: str = "") -> None:
        self.field = field
        super().__init__(path, f"missing required field '{field}'")


class InvalidFieldError(LibraryError):
    """A front-matter field has the wrong type or an invalid value."""

    def __init__(self, field: str, detail: str, path: str = "") -> None:
        self.field = field
        super().__init__(path, f"invalid field '{field}': {detail}")


class UnknownKindError(LibraryError):
    """The filename suffix does not map to prompt, instruction or agent."""

    def __init__(self, path: str) -> None:
        super().__init__(
            path,
            "unknown content kind (expected .prompt.md, .instructions.md or .agent.md)",
        )


class ManifestFormatError(LibraryError):
    """A collection manifest is malformed."""

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(path, f"invalid collection manifest: {detail}")


class DanglingReferenceError(LibraryError):
    """A manifest item points at no prompt, instruction or agent file."""

    def __init__(self, path: str, manifest: str = "") -> None:
        self.manifest = manifest
        super().__init__(
            path, "not a prompt, instruction or agent file in the library"
        )


class KindMismatchError(LibraryError):
    """A manifest item's declared kind disagrees with the file's suffix."""

    def __init__(
        self, path: str, expected: str, actual: str, manifest: str = ""
    ) -> None:
        self.expected = expected
        self.actual = actual
        self.manifest = manifest
        super().__init__(
            path, f"declared kind '{expected}' but file is a '{actual}'"
        )
