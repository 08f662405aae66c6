"""
Page Shell
==========

Full HTML documents around rendered page content.

The shell is a Jinja2 template with autoescaping; the page content it receives has
already been rendered through the escaping boundary and is marked safe.
"""

from pathlib import Path
from typing import Any, Dict, Optional

import jinja2
from markupsafe import Markup

from pagecraft.config.logging import get_logger
from pagecraft.config.settings import get_settings
from .context import RenderContext
from .nodes import Node

logger = get_logger(__name__)


class PageShellError(Exception):
    """Exception raised when the page shell cannot be rendered."""

    pass


class PageShell:
    """Jinja2-backed full page renderer."""

    def __init__(self, template_name: str = "page.html") -> None:
        self.settings = get_settings()
        self.template_name = template_name
        self.logger: Any = logger.bind(component="page_shell")
        template_dir = Path(__file__).parent / "templates"
        self.env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            autoescape=jinja2.select_autoescape(["html", "xml"]),
        )

    def _prepare_context(self, body: str, title: Optional[str]) -> Dict[str, Any]:
        return {
            "title": title or self.settings.page_title,
            "htmx_script_url": self.settings.htmx_script_url,
            "page_container_id": self.settings.page_container_id,
            "modal_container_id": self.settings.modal_container_id,
            "content": Markup(body),
        }

    def render(
        self,
        content: Node,
        title: Optional[str] = None,
        context: Optional[RenderContext] = None,
    ) -> str:
        """
        Render a complete HTML document.

        Args:
            content: Node rendered inside the page content container
            title: Document title, defaults to the configured page title
            context: Render context for the content

        Returns:
            HTML document

        Raises:
            PageShellError: If the template cannot be loaded or rendered
        """
        context = context or RenderContext.empty(self.settings.max_render_depth)
        body = content.render(context)
        try:
            template = self.env.get_template(self.template_name)
            html = template.render(**self._prepare_context(body, title))
        except jinja2.TemplateError as e:
            error_msg = f"Page shell rendering failed: {e}"
            self.logger.error("Page shell rendering failed", error=error_msg)
            raise PageShellError(error_msg) from e

        self.logger.info("Page shell rendered", template=self.template_name, html_length=len(html))
        return html
