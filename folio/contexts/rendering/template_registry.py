from pathlib import Path
from typing import Dict

from jinja2 import Environment, FileSystemLoader, Template, TemplateNotFound

TEMPLATES_PATH = Path(__file__).parent / "templates"


class TemplateRegistry:
    """
    Registry for loading and caching Jinja2 templates for HTML rendering.

    Templates are stored in folio/contexts/rendering/templates/{name}.html.jinja.
    Autoescaping is always on: every resume field is user input.
    """

    def __init__(self, templates_path: Path = None):
        """
        Initialize the template registry.

        Args:
            templates_path: Directory holding the templates. Defaults to
                           folio/contexts/rendering/templates/
        """
        self.templates_path = templates_path or TEMPLATES_PATH
        self._cache: Dict[str, Template] = {}

        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_path)),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def get_template(self, name: str) -> Template:
        """
        Get a template by name, loading and caching it if necessary.

        Args:
            name: Template name without extension (e.g., 'preview')

        Returns:
            Jinja2 Template object

        Raises:
            TemplateNotFound: If template file doesn't exist
            TemplateSyntaxError: If template has Jinja2 syntax errors
        """
        if name in self._cache:
            return self._cache[name]

        template_file = f"{name}.html.jinja"
        try:
            template = self.env.get_template(template_file)
        except TemplateNotFound as e:
            raise TemplateNotFound(
                f"Template '{name}' not found at {self.templates_path / template_file}"
            ) from e

        self._cache[name] = template
        return template

    def get_template_path(self, name: str) -> Path:
        """Get the file path for a template."""
        return self.templates_path / f"{name}.html.jinja"

    def clear_cache(self):
        """Clear the template cache."""
        self._cache.clear()

    def is_cached(self, name: str) -> bool:
        return name in self._cache
