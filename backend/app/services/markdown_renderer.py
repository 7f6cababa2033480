"""
Bilarn Blog Backend — Markdown Renderer
=========================================

What:  Converts a post's Markdown source to HTML.
How:   Python-Markdown with fenced code blocks and tables enabled. A fresh
       Markdown instance per call keeps rendering free of shared state.
Who:   BlogService.get_blog(), on every single-post read. List responses and
       the database only ever hold the raw Markdown.
"""

import markdown

EXTENSIONS = ["fenced_code", "tables"]


def render(markdown_text: str) -> str:
    """Render Markdown text to an HTML fragment."""
    return markdown.markdown(markdown_text, extensions=EXTENSIONS, output_format="html")
