"""
HTML element helpers shared by the renderer and the tag library
"""

from html import escape as html_escape
from typing import Any, Dict, Iterable, List, Optional, Union

# Void elements: no body, no closing tag
VOID_ELEMENTS = {'img', 'source', 'br', 'hr', 'input', 'meta', 'link'}

LIST_SEPARATOR_CHARS = ',;|'


def attrs_render(attr: Optional[Dict[str, Any]]) -> str:
    """
    Render an attribute dict as ' key="value" ...'

    None, False and empty strings are skipped; True renders as a bare
    boolean attribute (e.g. 'hidden'). Values are HTML-escaped.
    """
    if not attr:
        return ''

    parts = []
    for key, value in attr.items():
        if value is None or value is False or value == '':
            continue
        if value is True:
            parts.append(key)
        else:
            parts.append(f'{key}="{html_escape(str(value), quote=True)}"')

    return ' ' + ' '.join(parts) if parts else ''


def elem(name: str, attr: Optional[Union[Dict[str, Any], str]] = None, body: str = '') -> str:
    """
    Build one HTML element

    Args:
        name: Element name
        attr: Attribute dict, or the body when called as elem(name, body)
        body: Inner HTML (inserted verbatim)

    Example:
        >>> elem('a', {'href': '/', 'role': 'button'}, 'Go')
        '<a href="/" role="button">Go</a>'
        >>> elem('li', 'item')
        '<li>item</li>'
    """
    if isinstance(attr, str):
        body, attr = attr, None

    html = f'<{name}{attrs_render(attr)}>'
    if name in VOID_ELEMENTS:
        return html
    return f'{html}{body or ""}</{name}>'


def wrapper_apply(data: Dict[str, Any], html: str) -> str:
    """Wrap html in <div class="..."> when the tag carries wrapper="..." """
    wrapper = data.get('wrapper')
    if not wrapper:
        return html
    return elem('div', {'class': wrapper}, html)


def list_make(value: Any) -> List[Any]:
    """
    Normalize a tag value to a list

    Strings are split on ',', ';' or '|' (surrounding spaces trimmed),
    lists pass through, None becomes [] and anything else a 1-item list.

    Example:
        >>> list_make('First, Second | Third')
        ['First', 'Second', 'Third']
    """
    if value is None:
        return []
    if isinstance(value, str):
        for char in LIST_SEPARATOR_CHARS:
            value = value.replace(char, '\0')
        return [item.strip() for item in value.split('\0')]
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def join(items: Iterable[str], separator: str = '') -> str:
    """Join rendered fragments, skipping empty ones"""
    return separator.join(item for item in items if item)
