"""Detection of declarations lacking documentation.

Walks a parsed Java file and yields, in a fixed order, the
declarations that should receive generated Javadoc under the current
documentation settings.
"""

import logging

from docwriter.parsers.java_parser import SourceFile
from docwriter.parsers.structure import DeclarationNode
from docwriter.utils.config import DocsConfig

logger = logging.getLogger(__name__)


class MissingDocScanner:
    """Finds undocumented declarations selected by a DocsConfig.

    The file's top-level class or interface is considered first. Methods
    are only considered when that type is a class and method-level
    documentation is enabled for at least one visibility.
    """

    def __init__(self, config: DocsConfig) -> None:
        """Initialize the scanner.

        Args:
            config: Documentation settings deciding which kinds of
                declarations are candidates.
        """
        self.config = config

    def scan(self, source_file: SourceFile) -> list[DeclarationNode]:
        """Collect the undocumented declarations of a file.

        Args:
            source_file: The parsed file to inspect.

        Returns:
            Candidates in processing order: the top-level type first
            (when selected), then methods in declaration order. Empty
            when the file has no top-level class or interface.
        """
        top_type = source_file.top_level_type()
        if top_type is None:
            logger.info("No class or interface is present in file %s", source_file.path)
            return []

        candidates: list[DeclarationNode] = []
        if self.config.class_doc and not top_type.has_documentation:
            candidates.append(top_type)

        if top_type.is_interface:
            logger.debug("Skipping method scan of interface %s", top_type.name)
            return candidates

        if self.config.public_method_doc or self.config.non_public_method_doc:
            for method in source_file.methods():
                if self._wants_method(method):
                    candidates.append(method)
                else:
                    logger.debug("Skipping method %s", method.name)

        logger.debug("Found %d undocumented declarations in %s", len(candidates), source_file.path)
        for candidate in candidates:
            logger.debug("Candidate: %s", candidate.to_dict())
        return candidates

    def _wants_method(self, method: DeclarationNode) -> bool:
        if method.has_documentation:
            return False
        if method.is_public:
            return self.config.public_method_doc
        return self.config.non_public_method_doc
