"""
Markdown reader with frontmatter support.

YAML frontmatter is stripped from the body. The descriptive fields (title,
summary, tags, keywords) are kept as a short header in front of the body so
they are searchable once chunked.
"""

import logging
from pathlib import Path
from typing import Any

import frontmatter

from rag_doc_sync.core.interfaces import IFileReader
from rag_doc_sync.models.exceptions import DocumentReadError

logger = logging.getLogger(__name__)


class MarkdownFileReader(IFileReader):
    """Reads markdown files, folding frontmatter fields into the text."""

    EXTENSIONS = frozenset({".md", ".markdown"})
    HEADER_FIELDS = ("title", "summary", "tags", "keywords")

    def can_read(self, file_path: Path) -> bool:
        return Path(file_path).suffix.lower() in self.EXTENSIONS

    def read_text(self, file_path: Path) -> str:
        try:
            with open(file_path, encoding="utf-8") as f:
                post = frontmatter.load(f)
        except Exception as e:
            raise DocumentReadError(
                f"Failed to read markdown file {file_path}: {e}",
                file_path=str(file_path),
                reader=type(self).__name__,
                underlying_error=e,
            ) from e

        header = self._render_header(post.metadata, str(file_path))
        if not header:
            return post.content
        return f"{header}\n\n{post.content}"

    def _render_header(self, metadata: dict[str, Any], file_path: str) -> str:
        lines = []
        for field in self.HEADER_FIELDS:
            value = metadata.get(field)
            if value is None:
                continue
            if isinstance(value, list):
                value = ", ".join(str(item).strip() for item in value if str(item).strip())
            value = str(value).strip()
            if value:
                lines.append(f"{field}: {value}")

        unused = set(metadata) - set(self.HEADER_FIELDS)
        if unused:
            logger.debug("Ignoring frontmatter fields %s in %s", sorted(unused), file_path)
        return "\n".join(lines)
