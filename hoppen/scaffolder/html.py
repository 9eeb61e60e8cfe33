"""HTML document assembly.

Builds a project's ``index.html`` from the skeleton template.  Body content is
collected into ordered sections and always serialised in the same order,
whatever order the calls were made in:

1. page content (shader canvas, heading)
2. library ``<script>`` tags (CDN URLs)
3. app modules (shader hot-reload runtime), then the app entry script
4. the playground-prefill module, last overall
"""

from __future__ import annotations

import copy

from bs4 import BeautifulSoup, Tag


class HtmlAssembler:
    """Collects body tags for one project document and renders it."""

    def __init__(self, skeleton: str) -> None:
        self.soup = BeautifulSoup(skeleton, "lxml")
        self._content: list[Tag] = []
        self._libraries: list[Tag] = []
        self._modules: list[Tag] = []
        self._entry: Tag | None = None
        self._prefill: Tag | None = None
        self._title: str | None = None

    # -- Body sections -------------------------------------------------------

    def append_content(self, tag: Tag) -> None:
        """Append a copy of *tag* (possibly from another document) to the page."""
        self._content.append(copy.copy(tag))

    def append_heading(self, text: str, level: int = 1) -> None:
        heading = self.soup.new_tag(f"h{level}")
        heading.string = text
        self._content.append(heading)

    def append_library(self, src: str) -> None:
        self._libraries.append(self.soup.new_tag("script", attrs={"src": src}))

    def append_module(self, src: str) -> None:
        """Append an app module that must run before the entry script."""
        self._modules.append(self._module_tag(src))

    def append_entry(self, src: str, jsx: bool = False) -> None:
        """Set the app entry script.

        A component (JSX) entry is compiled in the browser by Babel
        standalone, which picks up ``type="text/babel"`` scripts.
        """
        if jsx:
            self._entry = self.soup.new_tag(
                "script",
                attrs={"type": "text/babel", "data-type": "module", "src": src},
            )
        else:
            self._entry = self._module_tag(src)

    def set_prefill(self, src: str) -> None:
        self._prefill = self._module_tag(src)

    def set_title(self, title: str) -> None:
        self._title = title

    # -- Output --------------------------------------------------------------

    def body_tags(self) -> list[Tag]:
        """Every body tag in final document order."""
        tags = [*self._content, *self._libraries, *self._modules]
        if self._entry is not None:
            tags.append(self._entry)
        if self._prefill is not None:
            tags.append(self._prefill)
        return tags

    def build(self) -> BeautifulSoup:
        """Return a fresh document with all collected sections applied."""
        doc = copy.copy(self.soup)

        if self._title is not None:
            title = doc.title
            if title is None:
                title = doc.new_tag("title")
                doc.head.append(title)
            title.string = self._title

        body = doc.body
        if body is None:
            body = doc.new_tag("body")
            doc.html.append(body)
        body.clear()
        for tag in self.body_tags():
            body.append(copy.copy(tag))
        return doc

    def render(self) -> str:
        return str(self.build())

    def _module_tag(self, src: str) -> Tag:
        return self.soup.new_tag("script", attrs={"type": "module", "src": src})
