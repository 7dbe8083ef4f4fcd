"""Java source parser and lexically faithful printer using tree-sitter.

Parses Java files into a tree-sitter syntax tree, exposes the
documentable declarations of the file, and prints the file back by
splicing recorded insertions into the original bytes so that every
untouched byte survives a parse, mutate and print round trip.
"""

import logging
from pathlib import Path
from typing import Iterator, Optional

import tree_sitter
import tree_sitter_java as tsjava

from docwriter.parsers.structure import (
    DeclarationKind,
    DeclarationNode,
    SourceSpan,
    Visibility,
)

logger = logging.getLogger(__name__)

_JAVA_LANGUAGE = tree_sitter.Language(tsjava.language())

_COMMENT_TYPES = {"block_comment", "line_comment"}

# Top-level declarations eligible as "the" type of a file
_CLASS_OR_INTERFACE = {"class_declaration", "interface_declaration"}

# Every declaration that contributes a segment to a qualified name
_TYPE_DECLARATIONS = {
    "class_declaration",
    "interface_declaration",
    "enum_declaration",
    "record_declaration",
    "annotation_type_declaration",
}


class ParseError(Exception):
    """Raised when a file is not syntactically valid Java.

    Attributes:
        file_path: Path of the file that failed to parse.
        line: 1-based line of the first syntax error, if known.
    """

    def __init__(self, file_path: str, message: str, line: Optional[int] = None) -> None:
        self.file_path = file_path
        self.line = line
        location = f"{file_path}:{line}" if line else file_path
        super().__init__(f"{location}: {message}")


class SourceFile:
    """A parsed Java file together with its pending comment insertions.

    The original bytes are never modified. Insertions are recorded
    against byte offsets of the original input and applied only when
    the file is rendered.
    """

    def __init__(self, file_path: str, data: bytes, text: str, tree: tree_sitter.Tree) -> None:
        self.path = Path(file_path)
        self.data = data
        self.text = text
        self.tree = tree
        self.newline = "\r\n" if b"\r\n" in data else "\n"
        self._insertions: list[tuple[int, int, bytes]] = []
        self._lines: Optional[list[str]] = None
        self._line_offsets: Optional[list[int]] = None

    @property
    def root(self) -> tree_sitter.Node:
        """The compilation unit node."""
        return self.tree.root_node

    @property
    def changed(self) -> bool:
        """Whether any insertion has been recorded."""
        return bool(self._insertions)

    def node_text(self, node: tree_sitter.Node) -> str:
        """Extract the original text of a tree-sitter node.

        Args:
            node: A node of this file's tree.

        Returns:
            The text covered by the node.
        """
        return self.data[node.start_byte : node.end_byte].decode("utf-8")

    def line(self, line_number: int) -> str:
        """Return the content of a 1-based line, without its line break.

        Lines are split on ``\\n`` only, matching tree-sitter row
        numbering. Out-of-range line numbers yield an empty string.
        """
        lines = self._split_lines()
        if 0 < line_number <= len(lines):
            return lines[line_number - 1]
        return ""

    def line_start(self, line_number: int) -> int:
        """Return the byte offset at which a 1-based line begins."""
        self._split_lines()
        offsets = self._line_offsets or [0]
        index = min(max(line_number - 1, 0), len(offsets) - 1)
        return offsets[index]

    def insert(self, offset: int, text: str) -> None:
        """Record text to be inserted before the given byte offset.

        Args:
            offset: Byte offset in the original input.
            text: Text to insert.

        Raises:
            ValueError: If the offset lies outside the file.
        """
        if not 0 <= offset <= len(self.data):
            raise ValueError(f"Insertion offset {offset} outside {self.path}")
        self._insertions.append((offset, len(self._insertions), text.encode("utf-8")))
        logger.debug("Recorded %d byte insertion at offset %d in %s", len(text), offset, self.path)

    def render(self) -> str:
        """Print the file with all recorded insertions applied.

        Returns:
            The original text when nothing was inserted, otherwise the
            original bytes with each insertion spliced in place.
        """
        if not self._insertions:
            return self.text

        chunks: list[bytes] = []
        position = 0
        for offset, _, payload in sorted(self._insertions):
            chunks.append(self.data[position:offset])
            chunks.append(payload)
            position = offset
        chunks.append(self.data[position:])
        return b"".join(chunks).decode("utf-8")

    def top_level_type(self) -> Optional[DeclarationNode]:
        """Find the first top-level class or interface of the file.

        Returns:
            The type declaration, or None if the file declares no class
            or interface at top level.
        """
        for child in self.root.children:
            if child.type in _CLASS_OR_INTERFACE:
                return self._declaration(child, DeclarationKind.TYPE)
        return None

    def methods(self) -> list[DeclarationNode]:
        """Collect every method declaration in source order.

        Nested, inner and anonymous class methods are included.
        Constructors are not method declarations.
        """
        return [
            self._declaration(node, DeclarationKind.METHOD)
            for node in _walk(self.root)
            if node.type == "method_declaration"
        ]

    def source_without_imports(self) -> str:
        """Join every compilation unit child except import declarations."""
        parts = [
            self.node_text(child)
            for child in self.root.children
            if child.type != "import_declaration"
        ]
        return "\n".join(parts)

    def _declaration(self, node: tree_sitter.Node, kind: DeclarationKind) -> DeclarationNode:
        """Build a DeclarationNode from a tree-sitter declaration node."""
        return DeclarationNode(
            kind=kind,
            name=self._qualified_name(node),
            visibility=_visibility(node),
            span=SourceSpan(
                start_line=node.start_point.row + 1,
                start_column=node.start_point.column,
                end_line=node.end_point.row + 1,
                end_column=node.end_point.column,
                start_byte=node.start_byte,
            ),
            has_documentation=_has_leading_comment(node),
            source=self.node_text(node),
            is_interface=node.type == "interface_declaration",
        )

    def _qualified_name(self, node: tree_sitter.Node) -> str:
        parts = [self._name_of(node)]
        parent = node.parent
        while parent is not None:
            if parent.type in _TYPE_DECLARATIONS:
                parts.append(self._name_of(parent))
            parent = parent.parent
        return ".".join(reversed([p for p in parts if p]))

    def _name_of(self, node: tree_sitter.Node) -> str:
        name_node = node.child_by_field_name("name")
        return self.node_text(name_node) if name_node else ""

    def _split_lines(self) -> list[str]:
        if self._lines is None:
            raw_lines = self.data.split(b"\n")
            offsets = []
            position = 0
            for raw in raw_lines:
                offsets.append(position)
                position += len(raw) + 1
            self._lines = [raw.decode("utf-8").rstrip("\r") for raw in raw_lines]
            self._line_offsets = offsets
        return self._lines


class JavaParser:
    """Parses Java source files into SourceFile objects using tree-sitter."""

    def parse_file(self, file_path: str) -> SourceFile:
        """Parse a Java file.

        Args:
            file_path: Path to the ``.java`` file.

        Returns:
            The parsed SourceFile.

        Raises:
            FileNotFoundError: If the file does not exist.
            UnicodeDecodeError: If the file is not valid UTF-8.
            ParseError: If the file is not syntactically valid.
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")
        return self.parse_bytes(path.read_bytes(), str(path))

    def parse_source(self, source: str, file_path: str = "<string>") -> SourceFile:
        """Parse Java source code held in a string."""
        return self.parse_bytes(source.encode("utf-8"), file_path)

    def parse_bytes(self, data: bytes, file_path: str = "<string>") -> SourceFile:
        """Parse raw Java source bytes.

        Args:
            data: UTF-8 encoded source.
            file_path: Path used for reporting and persistence.

        Returns:
            The parsed SourceFile.

        Raises:
            UnicodeDecodeError: If the data is not valid UTF-8.
            ParseError: If tree-sitter reports a syntax error.
        """
        text = data.decode("utf-8")
        parser = tree_sitter.Parser(_JAVA_LANGUAGE)
        tree = parser.parse(data)
        root = tree.root_node
        if root.has_error:
            error_node = _first_error(root)
            line = error_node.start_point.row + 1 if error_node else None
            raise ParseError(file_path, "source is not valid Java", line=line)

        source_file = SourceFile(file_path, data, text, tree)
        logger.debug("Parsed %s: %d top-level nodes", file_path, root.child_count)
        return source_file


def _walk(node: tree_sitter.Node) -> Iterator[tree_sitter.Node]:
    """Yield a node and all its descendants in pre-order."""
    yield node
    for child in node.children:
        yield from _walk(child)


def _first_error(node: tree_sitter.Node) -> Optional[tree_sitter.Node]:
    for candidate in _walk(node):
        if candidate.type == "ERROR" or candidate.is_missing:
            return candidate
    return None


def _visibility(node: tree_sitter.Node) -> Visibility:
    for child in node.children:
        if child.type == "modifiers" and any(m.type == "public" for m in child.children):
            return Visibility.PUBLIC
    return Visibility.NON_PUBLIC


def _has_leading_comment(node: tree_sitter.Node) -> bool:
    """Check whether a comment is attached to a declaration.

    Either the nearest preceding sibling is a comment that does not
    trail a previous sibling on the line where it ends, or a comment
    sits inside the declaration ahead of its name, e.g. between an
    annotation and the ``public`` keyword.
    """
    if _comment_before_name(node):
        return True
    comment = node.prev_sibling
    if comment is None or comment.type not in _COMMENT_TYPES:
        return False
    before = comment.prev_sibling
    if (
        before is not None
        and before.is_named
        and before.type not in _COMMENT_TYPES
        and before.end_point.row == comment.start_point.row
    ):
        return False
    return True


def _comment_before_name(node: tree_sitter.Node) -> bool:
    """Check for a comment inside the declaration ahead of its name."""
    name = node.child_by_field_name("name")
    for child in node.children:
        if name is not None and child.start_byte >= name.start_byte:
            break
        if child.type in _COMMENT_TYPES:
            return True
        if child.type == "modifiers" and any(m.type in _COMMENT_TYPES for m in child.children):
            return True
    return False
