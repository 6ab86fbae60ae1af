"""Template rendering for digests using Jinja2.

This module wraps Jinja2 rendering with strict undefined checking so a
template referencing a missing field fails loudly instead of printing blanks.
"""

import logging
import re
from typing import Dict

from jinja2 import Environment, PackageLoader, StrictUndefined, TemplateError

from .models import NotificationTemplateError

logger = logging.getLogger(__name__)

_MARKDOWN_SPECIAL_RE = re.compile(r"([_*`\[])")


def escape_markdown(value) -> str:
    """Escape characters that Telegram's legacy Markdown treats as markup."""
    return _MARKDOWN_SPECIAL_RE.sub(r"\\\1", str(value))


def markdown_bold(value) -> str:
    """Wrap text in a bold entity.

    Backslash escapes are not allowed inside an entity, so each "*" in the
    text closes the entity, is written escaped, and a new entity opens after it.
    """
    parts = str(value).split("*")
    return "\\*".join(f"*{part}*" if part else "" for part in parts)


class DigestRenderer:
    """Renders digests from templates in platform_monitor.notifications.digest_templates.

    Two templates are used: a Telegram Markdown message and a plain-text
    console digest. Templates are cached by Jinja2 after first load.
    """

    def __init__(
        self,
        template_dir: str = "digest_templates",
        telegram_template: str = "telegram_digest.md.j2",
        console_template: str = "console_digest.txt.j2",
    ):
        """Initialize renderer with a Jinja2 environment.

        Args:
            template_dir: Directory name within the platform_monitor.notifications package
            telegram_template: Filename of the Telegram Markdown template
            console_template: Filename of the plain-text template
        """
        self.telegram_template_name = telegram_template
        self.console_template_name = console_template

        # Output is Markdown or plain text, never HTML
        self.env = Environment(
            loader=PackageLoader("platform_monitor.notifications", template_dir),
            autoescape=False,
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["md_escape"] = escape_markdown
        self.env.filters["md_bold"] = markdown_bold

        logger.debug(f"Initialized DigestRenderer with templates from {template_dir}")

    def render_telegram(self, context: Dict) -> str:
        """Render the Telegram Markdown message.

        Raises:
            NotificationTemplateError: If template rendering fails
        """
        return self._render(self.telegram_template_name, context)

    def render_console(self, context: Dict) -> str:
        """Render the plain-text console digest.

        Raises:
            NotificationTemplateError: If template rendering fails
        """
        return self._render(self.console_template_name, context)

    def _render(self, template_name: str, context: Dict) -> str:
        try:
            template = self.env.get_template(template_name)
            rendered = template.render(context)
        except TemplateError as e:
            error_msg = f"Template rendering failed for {template_name}: {e}"
            logger.error(error_msg, exc_info=True)
            raise NotificationTemplateError(error_msg) from e

        logger.debug(f"Rendered {template_name} with {context.get('count', 0)} records")
        return rendered
