"""Source formatting for generated files.

HTML is pretty-printed with BeautifulSoup.  GLSL goes through an optional
external formatter (``clang-format`` by default); when it is not installed
or fails, the unformatted source is used.  ``raw`` assets are copied
verbatim; everything else only gets its line endings normalised.
"""

from __future__ import annotations

import shutil

from bs4 import BeautifulSoup
from bs4.dammit import EntitySubstitution
from bs4.formatter import HTMLFormatter

from hoppen.config import FormatterConfig
from hoppen.utils import run_command

KINDS = ("html", "css", "js", "jsx", "glsl", "raw")


class CodeFormatter:
    """Formats generated sources according to a ``FormatterConfig``."""

    def __init__(self, config: FormatterConfig | None = None) -> None:
        self.config = config or FormatterConfig()
        self._html_formatter = HTMLFormatter(
            entity_substitution=EntitySubstitution.substitute_xml,
            indent=self.config.indent,
        )

    async def format(self, source: str, kind: str) -> str:
        """Format *source* as *kind* (one of :data:`KINDS`)."""
        if kind not in KINDS:
            raise ValueError(f"Unknown source kind: {kind!r}")
        if kind == "raw":
            return source
        if kind == "html":
            return self.format_html(source)
        if kind == "glsl":
            return await self.format_glsl(source)
        return normalize(source)

    def format_html(self, source: str) -> str:
        soup = BeautifulSoup(source, "lxml")
        return normalize(soup.prettify(formatter=self._html_formatter))

    async def format_glsl(self, source: str) -> str:
        executable = shutil.which(self.config.glsl_formatter)
        if not executable or not source.strip():
            return normalize(source)
        try:
            returncode, stdout, _ = await run_command(
                [executable, f"--style={self.config.clang_style}"],
                input_text=source,
            )
        except OSError:
            return normalize(source)
        if returncode != 0 or not stdout.strip():
            return normalize(source)
        return normalize(stdout)


def normalize(source: str) -> str:
    """Use LF line endings and end non-empty text with exactly one newline."""
    text = source.replace("\r\n", "\n").replace("\r", "\n")
    if not text.strip():
        return ""
    return text.rstrip("\n") + "\n"
