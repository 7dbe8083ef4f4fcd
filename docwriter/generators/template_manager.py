"""Template manager for loading and rendering Jinja2 prompt templates.

Provides a centralized interface for rendering the Javadoc generation
instructions and the worked example from Jinja2 templates stored in
the package's templates/ directory.
"""

import logging
from pathlib import Path
from typing import Any, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined

logger = logging.getLogger(__name__)

_DEFAULT_TEMPLATES_DIR = Path(__file__).parent.parent / "templates"


class TemplateManager:
    """Loads and renders Jinja2 prompt templates for Javadoc generation.

    Templates are loaded from a configurable directory. Every template
    receives the documented language name as ``language``.
    """

    def __init__(self, templates_dir: Optional[str] = None, language: str = "Java") -> None:
        """Initialize the template manager.

        Args:
            templates_dir: Path to the templates directory. Uses the
                packaged templates/ directory if not specified.
            language: Source language named in the instructions.
        """
        self._templates_path = (
            Path(templates_dir) if templates_dir else _DEFAULT_TEMPLATES_DIR
        )
        self.language = language

        if not self._templates_path.exists():
            logger.warning("Templates directory not found: %s", self._templates_path)

        self._env = Environment(
            loader=FileSystemLoader(str(self._templates_path)),
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
            autoescape=False,
        )
        logger.debug("Template manager initialized with: %s", self._templates_path)

    def render_type_instructions(self) -> str:
        """Render the system instructions for type-level documentation."""
        return self._render("type_doc.j2")

    def render_method_instructions(self) -> str:
        """Render the system instructions for method-level documentation."""
        return self._render("method_doc.j2")

    def render_type_example(self) -> tuple[str, str]:
        """Render the worked example for type-level documentation.

        Returns:
            A pair of (undocumented source, expected Javadoc).
        """
        return (
            self._render("type_example_input.j2"),
            self._render("type_example_output.j2"),
        )

    def _render(self, template_name: str, **kwargs: Any) -> str:
        """Render a template with the given context variables.

        Args:
            template_name: Name of the template file to render.
            **kwargs: Template context variables.

        Returns:
            Rendered template string.

        Raises:
            TemplateNotFound: If the template file does not exist.
        """
        template = self._env.get_template(template_name)
        rendered = template.render(language=self.language, **kwargs)
        logger.debug("Rendered template %s (%d chars)", template_name, len(rendered))
        return rendered
