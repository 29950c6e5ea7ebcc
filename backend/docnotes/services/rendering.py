# docnotes/services/rendering.py
"""
Markdown rendering collaborator.
Entry bodies are stored raw and rendered once on save; the rendered HTML is
cached on the entry row.
"""
import markdown

MARKDOWN_EXTENSIONS = ["fenced_code", "tables", "sane_lists"]


def render_markdown(text: str) -> str:
    """
    Render an entry body to HTML.

    Args:
        text: Raw markdown body

    Returns:
        Rendered HTML string ("" for an empty body)
    """
    if not text:
        return ""
    return markdown.markdown(text, extensions=MARKDOWN_EXTENSIONS, output_format="html")
