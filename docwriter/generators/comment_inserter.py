"""Conversion of generated text into indented Javadoc blocks.

The formatting is a pure function of the extracted body and the
target column, independent of any tree. Attachment records the
formatted block as an insertion in the in-memory SourceFile only.
"""

import logging
import textwrap
from typing import Optional

from docwriter.generators.llm_client import CLOSE_DELIMITER, OPEN_DELIMITER, DocumentationResult
from docwriter.parsers.java_parser import SourceFile
from docwriter.parsers.structure import DeclarationKind, DeclarationNode

logger = logging.getLogger(__name__)

TAB_WIDTH = 4
ESCAPED_CLOSE_DELIMITER = "*&#47;"


def leading_width(line: str, tab_width: int = TAB_WIDTH) -> int:
    """Measure the leading whitespace of a line.

    Args:
        line: A single source line.
        tab_width: Columns counted for each tab character.

    Returns:
        Number of columns before the first non-whitespace character.
    """
    width = 0
    for char in line:
        if char == " ":
            width += 1
        elif char == "\t":
            width += tab_width
        else:
            break
    return width


def comment_lines(body: str) -> list[str]:
    """Normalize an extracted Javadoc body into content lines.

    A leading ``* `` decoration is removed from each line together with
    the whitespace before it. Anything after the decoration is kept,
    including further indentation and emphasis markers such as
    ``**bold**``. Undecorated lines are dedented as a group, and blank
    lines at either end are discarded.
    """
    lines = []
    for raw in body.splitlines():
        stripped = raw.lstrip()
        if stripped == "*":
            line = ""
        elif stripped.startswith("* "):
            line = stripped[2:]
        elif stripped.startswith("*"):
            line = stripped
        else:
            line = raw
        lines.append(line.rstrip())

    while lines and not lines[0]:
        lines.pop(0)
    while lines and not lines[-1]:
        lines.pop()
    if not lines:
        return []
    return textwrap.dedent("\n".join(lines)).split("\n")


def indent_comment(
    text: str,
    column: int,
    author: Optional[str] = None,
    newline: str = "\n",
) -> str:
    """Format a Javadoc body as a comment block at a given column.

    The opening and closing delimiter lines start at ``column``; every
    interior line starts one space further. Any ``*/`` inside the body
    is escaped so it cannot end the comment early.

    Args:
        text: Extracted body, without the outer delimiters.
        column: Column of the declaration the block precedes.
        author: If given, an ``@author`` tag is appended after a
            blank line.
        newline: Line separator of the target file.

    Returns:
        The comment block without a trailing newline, or an empty
        string when the body has no content.
    """
    lines = [line.replace(CLOSE_DELIMITER, ESCAPED_CLOSE_DELIMITER) for line in comment_lines(text)]
    if not lines:
        return ""
    if author:
        lines.extend(["", f"@author {author}"])

    pad = " " * column
    block = [pad + OPEN_DELIMITER]
    block.extend(f"{pad} * {line}" if line else f"{pad} *" for line in lines)
    block.append(pad + CLOSE_DELIMITER)
    return newline.join(block)


class CommentInserter:
    """Attaches generated Javadoc to declarations of a SourceFile."""

    def attach(
        self,
        source_file: SourceFile,
        node: DeclarationNode,
        result: DocumentationResult,
        author: Optional[str] = None,
    ) -> bool:
        """Attach a generated comment in front of a declaration.

        Methods are aligned to the column their first line is indented
        to, with tabs counted as TAB_WIDTH columns. Types are attached
        at column zero and receive the ``@author`` tag.

        Args:
            source_file: File the declaration belongs to.
            node: The declaration to document.
            result: Generation result holding the extracted body.
            author: Author for type-level documentation.

        Returns:
            True if a comment was attached, False if the result held no
            usable documentation.
        """
        if not result.found:
            return False

        newline = source_file.newline
        if node.kind == DeclarationKind.METHOD:
            column = leading_width(source_file.line(node.span.start_line))
            block = indent_comment(result.body or "", column, newline=newline)
        else:
            column = 0
            block = indent_comment(result.body or "", column, author=author, newline=newline)

        if not block:
            logger.warning("Generated documentation for %s is empty", node.name)
            return False

        line_start = source_file.line_start(node.span.start_line)
        prefix = source_file.data[line_start : node.span.start_byte]
        if prefix.strip():
            # Code precedes the declaration on its line
            source_file.insert(
                node.span.start_byte, newline + block + newline + " " * column
            )
        else:
            source_file.insert(line_start, block + newline)

        logger.debug("Attached %d line comment to %s", block.count("\n") + 1, node.name)
        return True
