# folio/markdown_renderer.py
import bleach
import markdown
from markupsafe import Markup

ALLOWED_TAGS = [
    'p', 'br', 'hr', 'strong', 'em', 'u', 'del', 'a', 'img',
    'ul', 'ol', 'li', 'h1', 'h2', 'h3', 'h4', 'h5', 'h6',
    'code', 'pre', 'blockquote',
    'table', 'thead', 'tbody', 'tr', 'th', 'td',
]

ALLOWED_ATTRS = {
    'a': ['href', 'title'],
    'img': ['src', 'alt', 'title'],
    # fenced_code emits class="language-xxx" for highlighting
    'code': ['class'],
    'th': ['align'],
    'td': ['align'],
}

ALLOWED_PROTOCOLS = ['http', 'https', 'mailto']

MARKDOWN_EXTENSIONS = ['fenced_code', 'tables', 'sane_lists']


def sanitize_content(html: str) -> str:
    """Strip tags and attributes outside the allow-list."""
    return bleach.clean(
        html,
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRS,
        protocols=ALLOWED_PROTOCOLS,
        strip=True,
    )


def sanitize_title(title: str) -> str:
    """Remove every HTML tag from a title."""
    return bleach.clean(title, tags=[], strip=True)


def render_markdown(text: str) -> Markup:
    """Render markdown to sanitized HTML, safe to insert into templates."""
    if not text or not text.strip():
        return Markup('')
    html = markdown.markdown(text.strip(), extensions=MARKDOWN_EXTENSIONS)
    return Markup(sanitize_content(html))
