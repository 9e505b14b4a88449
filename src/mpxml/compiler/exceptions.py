"""Compiler error types."""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from mpxml.compiler.ast_nodes import Directive


class MpxmlError(Exception):
    """Base class for all mpxml errors."""


class AuthoringError(MpxmlError):
    """A directive shape the template generator cannot interpret."""

    def __init__(
        self,
        message: str,
        directive: Optional["Directive"] = None,
        file_path: str = "",
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        self.message = message
        self.directive = directive
        self.file_path = file_path
        self.line = line
        self.column = column
        super().__init__(self._format())

    def _format(self) -> str:
        location = self.file_path or "<template>"
        if self.line:
            location += f":{self.line}"
            if self.column is not None:
                location += f":{self.column}"
        return f"{location}: {self.message}"


class AstLoadError(MpxmlError):
    """Malformed JSON template document."""

    def __init__(self, message: str, path: str = "$", file_path: str = ""):
        self.message = message
        self.path = path
        self.file_path = file_path
        prefix = f"{file_path}: " if file_path else ""
        super().__init__(f"{prefix}{message} (at {path})")


class UnknownDialectError(MpxmlError, KeyError):
    def __init__(self, name: str, available: "list[str]"):
        self.name = name
        self.available = available
        super().__init__(
            f"Unknown dialect '{name}'. Available: {', '.join(available)}"
        )

    def __str__(self) -> str:
        # KeyError would repr() the message
        return str(self.args[0])
