"""Prompt construction for Javadoc generation requests.

Turns a declaration into a DocumentationRequest following one of two
fixed policies: the type policy shows the whole compilation unit minus
its imports together with a worked example, the method policy shows
the single method declaration.
"""

import logging
import textwrap
from dataclasses import dataclass, field
from typing import Optional

from docwriter.generators.template_manager import TemplateManager
from docwriter.parsers.java_parser import SourceFile
from docwriter.parsers.structure import DeclarationKind, DeclarationNode

logger = logging.getLogger(__name__)

# Stop before the model starts echoing the declaration it documents
_TYPE_STOP_SEQUENCES = ("public class", "public interface")


@dataclass(frozen=True)
class ExampleExchange:
    """A worked example shown to the model before the real snippet.

    Attributes:
        user: Example input source.
        assistant: Expected documentation for the input.
    """

    user: str
    assistant: str


@dataclass(frozen=True)
class DocumentationRequest:
    """A single documentation request sent to the backend.

    Attributes:
        kind: Kind of the declaration being documented.
        name: Qualified name of the declaration.
        source: Snippet shown to the model.
        instructions: System instructions for the chosen policy.
        examples: Worked examples preceding the snippet.
        stop_sequences: Sequences at which generation halts.
        author: Author for the ``@author`` tag, type-level only.
    """

    kind: DeclarationKind
    name: str
    source: str
    instructions: str
    examples: tuple[ExampleExchange, ...] = field(default_factory=tuple)
    stop_sequences: tuple[str, ...] = field(default_factory=tuple)
    author: Optional[str] = None


class PromptBuilder:
    """Builds documentation requests for type and method declarations."""

    def __init__(
        self,
        author: Optional[str] = None,
        template_manager: Optional[TemplateManager] = None,
    ) -> None:
        """Initialize the prompt builder.

        Args:
            author: Name placed in the ``@author`` tag of type docs.
            template_manager: Template manager for prompts. Creates
                a default instance if not provided.
        """
        self.author = author
        self.templates = template_manager or TemplateManager()

    def build(self, node: DeclarationNode, source_file: SourceFile) -> DocumentationRequest:
        """Build the request for one declaration.

        Args:
            node: The undocumented declaration.
            source_file: The file the declaration belongs to.

        Returns:
            A DocumentationRequest following the policy for the node's kind.
        """
        if node.kind == DeclarationKind.TYPE:
            request = self._build_type_request(node, source_file)
        else:
            request = self._build_method_request(node, source_file)
        logger.debug("Built %s request for %s (%d chars)", node.kind.value, node.name, len(request.source))
        return request

    def _build_type_request(
        self, node: DeclarationNode, source_file: SourceFile
    ) -> DocumentationRequest:
        example_input, example_output = self.templates.render_type_example()
        return DocumentationRequest(
            kind=DeclarationKind.TYPE,
            name=node.name,
            source=source_file.source_without_imports(),
            instructions=self.templates.render_type_instructions(),
            examples=(ExampleExchange(user=example_input, assistant=example_output),),
            stop_sequences=_TYPE_STOP_SEQUENCES,
            author=self.author,
        )

    def _build_method_request(
        self, node: DeclarationNode, source_file: SourceFile
    ) -> DocumentationRequest:
        return DocumentationRequest(
            kind=DeclarationKind.METHOD,
            name=node.name,
            source=_dedented_source(node, source_file),
            instructions=self.templates.render_method_instructions(),
        )


def _dedented_source(node: DeclarationNode, source_file: SourceFile) -> str:
    """Return the declaration text with its common indentation removed.

    The node text starts mid-line, so the whitespace in front of it on
    its first line is restored before dedenting.
    """
    prefix = source_file.line(node.span.start_line)[: node.span.start_column]
    if prefix.strip():
        return node.source
    return textwrap.dedent(prefix + node.source)
