"""
HTML Escaping Service

Escapes submitted text before it is placed into the email body.
Every character the user typed survives: markup, comments and
entity-like text are escaped, never stripped or decoded.
"""

import html


class SanitizationService:
    """Service for making submitted text safe to embed in HTML."""

    def escape_text(self, text: str) -> str:
        """
        Escape HTML in a submitted key or value.

        Args:
            text: Raw submitted text

        Returns:
            str: Text with markup escaped, safe for an HTML cell
        """
        if not text:
            return ""

        return html.escape(text)
