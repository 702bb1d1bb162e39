"""
Custom Pygments lexer for tagdown syntax highlighting

Highlights tagdown source shown in ```tagdown code fences, e.g. when
documenting the tags themselves.

Token types:
- Name.Tag: Tag names ([image], [list], [!])
- Name.Decorator: .class and #id shorthand
- Name.Attribute: Keys and boolean flags (size=, autoplay)
- String: Quoted literals
- Literal: Bare values and positionals (/meow.png)
- Generic.Heading: # headings
- Keyword: Bullets and --- rules
"""

from pygments.lexer import RegexLexer, bygroups
from pygments.token import (
    Text,
    Whitespace,
    Punctuation,
    Name,
    String,
    Keyword,
    Literal,
    Generic,
)


class TagdownLexer(RegexLexer):
    """
    Lexer for tagdown markup

    Example:
        [image.hero /meow.png caption="Hello"]

    Tokens:
        [ → Punctuation
        image → Name.Tag
        .hero → Name.Decorator
        /meow.png → Literal
        caption → Name.Attribute
        "Hello" → String
        ] → Punctuation
    """

    name = 'Tagdown'
    aliases = ['tagdown', 'td']
    filenames = ['*.td']

    tokens = {
        'root': [
            # Code fence: verbatim until the closing fence
            (r'^([ \t]*)(`{3,})([^\n]*)(\n)',
             bygroups(Whitespace, Punctuation, Name.Label, Whitespace), 'fence'),

            # Rule separating groups
            (r'^[ \t]*-{3,}[ \t]*$', Keyword),

            # Headings
            (r'^([ \t]*)(#{1,6})([ \t][^\n]*)?$',
             bygroups(Whitespace, Generic.Heading, Generic.Heading)),

            # Bullets
            (r'^([ \t]*)(\*)(?=[ \t])', bygroups(Whitespace, Keyword)),

            # Tag header: name or shorthand after the opening bracket
            (r'(\[)(?=[\w.#!:])([\w!:-]*)', bygroups(Punctuation, Name.Tag), 'header'),

            # Everything else is text
            (r'[^\[\n]+', Text),
            (r'\n', Whitespace),
            (r'.', Text),
        ],

        'header': [
            (r'\]', Punctuation, '#pop'),

            # .class and #id shorthand
            (r'([.#])([\w-]+)', bygroups(Punctuation, Name.Decorator)),

            # key="literal" and key=bareword
            (r'([\w:-]+)(=)("[^"]*"?)', bygroups(Name.Attribute, Punctuation, String)),
            (r'([\w:-]+)(=)([^\s\]]*)', bygroups(Name.Attribute, Punctuation, Literal)),

            # Positional literal
            (r'"[^"]*"?', String),

            # Boolean flag
            (r'[A-Za-z_:][\w:-]*(?=[\s\]])', Name.Attribute),

            (r'\s+', Whitespace),

            # Bare positional such as /meow.png
            (r'[^\s\]]+', Literal),
        ],

        'fence': [
            (r'^([ \t]*)(`{3,})([ \t]*)$', bygroups(Whitespace, Punctuation, Whitespace), '#pop'),
            (r'[^\n]*\n', String),
            (r'[^\n]+', String),
        ],
    }
