"""Jinja2 template renderer implementation for the Early Access Service.

Renders the notification emails with autoescaping always on, so every
interpolated user value is HTML-escaped (``& < > " '``). Subjects are read
from a leading ``<!-- subject: ... -->`` comment in each template.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, TemplateNotFound
from tiktrend_service_libs.logging_utils import create_service_logger

from services.early_access_service.protocols import RenderedTemplate, TemplateRenderer

logger = create_service_logger("early_access_service.template_renderer")

SUBJECT_PATTERN = re.compile(r"<!--\s*subject:\s*(.+?)\s*-->", re.IGNORECASE)


class JinjaTemplateRenderer(TemplateRenderer):
    """Jinja2-based template renderer for the notification emails.

    Supports:
    - Async template rendering
    - Subject extraction from HTML comments
    - Text content generation from HTML
    - Template existence validation
    """

    def __init__(self, template_path: str = "templates") -> None:
        """Initialize the Jinja2 template renderer.

        Args:
            template_path: Path to the templates directory, relative to the
                service root unless absolute
        """
        service_root = Path(__file__).parent.parent
        self.template_dir = service_root / template_path

        logger.info(f"Initializing Jinja2 renderer with template directory: {self.template_dir}")

        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=True,
            enable_async=True,
        )

    async def render(
        self,
        template_id: str,
        variables: dict[str, Any],
    ) -> RenderedTemplate:
        """Render an email template with variables.

        Args:
            template_id: Template identifier (without .html.j2 extension)
            variables: Variables to substitute in the template

        Returns:
            RenderedTemplate with subject, HTML content, and text content

        Raises:
            TemplateNotFound: If the template file does not exist
        """
        template_filename = f"{template_id}.html.j2"

        logger.debug(
            f"Rendering template: {template_filename} with variables: {list(variables.keys())}"
        )

        try:
            template = self.env.get_template(template_filename)
        except TemplateNotFound:
            logger.error(f"Template not found: {template_filename}")
            raise

        html_content = await template.render_async(**variables)

        subject = self._extract_subject(html_content)
        if not subject:
            logger.warning(f"No subject found in template {template_filename}, using default")
            subject = f"TikTrend AI - {template_id}"

        return RenderedTemplate(
            subject=subject,
            html_content=html_content,
            text_content=self._generate_text_content(html_content),
        )

    async def template_exists(self, template_id: str) -> bool:
        return (self.template_dir / f"{template_id}.html.j2").exists()

    def _extract_subject(self, html_content: str) -> str | None:
        """Extract subject from ``<!-- subject: Your Subject Here -->``."""
        match = SUBJECT_PATTERN.search(html_content)
        if match:
            return match.group(1).strip()
        return None

    def _generate_text_content(self, html_content: str) -> str:
        """Generate plain text content from HTML using basic conversion."""
        text_content = SUBJECT_PATTERN.sub("", html_content)

        text_content = re.sub(r"<br\s*/?>", "\n", text_content, flags=re.IGNORECASE)
        text_content = re.sub(r"</?(p|div|h\d|hr)[^>]*>", "\n", text_content, flags=re.IGNORECASE)

        # Remove all other HTML tags
        text_content = re.sub(r"<[^>]+>", "", text_content)

        # Decode the entities produced by autoescaping; &amp; last
        text_content = text_content.replace("&nbsp;", " ")
        text_content = text_content.replace("&lt;", "<")
        text_content = text_content.replace("&gt;", ">")
        text_content = text_content.replace("&#34;", '"')
        text_content = text_content.replace("&quot;", '"')
        text_content = text_content.replace("&#39;", "'")
        text_content = text_content.replace("&amp;", "&")

        text_content = re.sub(r"[ \t]+", " ", text_content)
        text_content = re.sub(r"\n\s*\n+", "\n\n", text_content)
        return text_content.strip()
