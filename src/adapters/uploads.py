"""Decodificación de ficheros subidos para el pipeline bulk.

Por qué:
- Casi siempre son listas planas (txt/csv), pero también llegan páginas web
  guardadas; de esas solo se conserva el texto visible antes de tokenizar.
"""

from __future__ import annotations

import re

from bs4 import BeautifulSoup

_HTML_HINT_RE = re.compile(r"<\s*(html|body|div|p|table|a|ul|li|span)\b", re.IGNORECASE)


def looks_like_html(text: str, *, filename: str | None = None, content_type: str | None = None) -> bool:
    if content_type and "html" in content_type.lower():
        return True
    if filename and filename.lower().endswith((".html", ".htm")):
        return True
    return bool(_HTML_HINT_RE.search(text[:4096]))


def html_to_text(html: str) -> str:
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style", "noscript"]):
        tag.decompose()
    return soup.get_text(separator=" ")


def decode_upload(
    data: bytes | str,
    *,
    filename: str | None = None,
    content_type: str | None = None,
) -> str:
    """Devuelve texto tokenizable para un fichero subido."""

    text = data if isinstance(data, str) else data.decode("utf-8", errors="replace")
    text = text.lstrip("\ufeff")
    if looks_like_html(text, filename=filename, content_type=content_type):
        return html_to_text(text)
    return text
