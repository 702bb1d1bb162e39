"""
Code fence rendering

Fences that name a language are highlighted with Pygments using inline
styles (no external stylesheet needed). Shorthand tokens in the info string
wrap the block in a classed <div>:

    ``` python .example#first
    print("hi")
    ```

renders as <div class="example" id="first"><div class="highlight">...</div></div>.
"""

from html import escape as html_escape
from typing import Tuple

from pygments import highlight
from pygments.lexers import get_lexer_by_name, TextLexer
from pygments.lexer import Lexer
from pygments.formatters import HtmlFormatter
from pygments.util import ClassNotFound

from ..config import AppSettings
from ..models.blocks import BlockNode
from .elements import elem
from .header import attr_parse
from .lexer import TagdownLexer
from .log import LOG


def info_parse(info: str) -> Tuple[str, dict]:
    """
    Split a fence info string into language and shorthand attributes

    Example:
        >>> info_parse('python .foo#bar')
        ('python', {'id': 'bar', 'class': 'foo'})
        >>> info_parse('.foo')
        ('', {'class': 'foo'})
    """
    language = ''
    shorthand = []
    for token in info.split():
        if token[0] in '.#':
            shorthand.append(token)
        elif not language:
            language = token
    return language, attr_parse(''.join(shorthand))


def lexer_get(language: str) -> Lexer:
    """Pygments lexer for a language name, plain text when unknown"""
    try:
        if language.lower() in TagdownLexer.aliases:
            return TagdownLexer()
        return get_lexer_by_name(language)
    except ClassNotFound:
        LOG(f"Warning: no lexer for '{language}', highlighting as text", level=2)
        return TextLexer()


def code_highlight(code: str, language: str, settings: AppSettings) -> str:
    """
    Render code as HTML

    Args:
        code: Verbatim code
        language: Language name from the fence, may be empty
        settings: Supplies highlight_code and pygments_style

    Returns:
        Pygments HTML when a language is named and highlighting is on,
        otherwise an escaped <pre><code> block
    """
    if not language or not settings.highlight_code:
        code_attr = {'class': f'language-{language}'} if language else None
        return elem('pre', elem('code', code_attr, html_escape(code, quote=False)))

    formatter = HtmlFormatter(style=settings.pygments_style, noclasses=True)
    return highlight(code, lexer_get(language), formatter).strip()


def fence_render(node: BlockNode, settings: AppSettings) -> str:
    """Render a CODE_FENCE node, wrapped in a <div> when it carries shorthand"""
    language, attr = info_parse(node.header)
    html = code_highlight(node.text, language, settings)
    return elem('div', attr, html) if attr else html
