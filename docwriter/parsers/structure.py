"""Data models for documentable Java declarations.

Defines the declaration kinds, visibility, source spans and the
declaration node shared by the parser, the scanner, the prompt
builder and the comment inserter.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class DeclarationKind(str, Enum):
    """Kinds of declarations that can receive documentation."""

    TYPE = "type"
    METHOD = "method"


class Visibility(str, Enum):
    """Declared visibility of a declaration."""

    PUBLIC = "public"
    NON_PUBLIC = "non_public"


@dataclass(frozen=True)
class SourceSpan:
    """Location of a declaration in its source file.

    Lines are 1-based, columns are 0-based byte offsets within the line
    as reported by tree-sitter.

    Attributes:
        start_line: Line where the declaration begins.
        start_column: Column where the declaration begins.
        end_line: Line where the declaration ends.
        end_column: Column where the declaration ends.
        start_byte: Byte offset of the declaration in the file.
    """

    start_line: int
    start_column: int
    end_line: int
    end_column: int
    start_byte: int = 0


@dataclass(frozen=True)
class DeclarationNode:
    """A documentable unit found in a parsed source file.

    Attributes:
        kind: Whether this is a type or a method declaration.
        name: Qualified name, e.g. ``Outer.Inner.method``.
        visibility: PUBLIC only when the ``public`` modifier is present.
        span: Location of the declaration.
        has_documentation: Whether a comment already precedes the node.
        source: Raw source text of the declaration.
        is_interface: True for interface type declarations.
    """

    kind: DeclarationKind
    name: str
    visibility: Visibility
    span: SourceSpan
    has_documentation: bool
    source: str
    is_interface: bool = False

    @property
    def is_public(self) -> bool:
        """Whether the declaration carries the ``public`` modifier."""
        return self.visibility == Visibility.PUBLIC

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a dictionary.

        Returns:
            Dictionary representation of this declaration, without
            its source text.
        """
        return {
            "kind": self.kind.value,
            "name": self.name,
            "visibility": self.visibility.value,
            "start_line": self.span.start_line,
            "start_column": self.span.start_column,
            "end_line": self.span.end_line,
            "end_column": self.span.end_column,
            "has_documentation": self.has_documentation,
            "is_interface": self.is_interface,
        }
