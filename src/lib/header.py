"""
Parser for [tag ...] directive headers

Turns the text between a directive's outer brackets into a DirectiveHeader
of {name, attr, data}.

Header grammar (informal):
    name-or-shorthand (key="literal" | key=bareword | flag | .class | #id)* "positional"?

Steps:
1. Mask quoted literals (see tokenizer.quotes_mask)
2. Split the first token into tag name and .class#id shorthand
3. Classify every remaining token and route its key to attr or data

Example:
    >>> header = header_parse('tip#foo.bar "Hey there" size="40" grayed hidden')
    >>> header.name
    'tip'
    >>> header.data
    {'_': 'Hey there', 'size': 40, 'grayed': True}
    >>> header.attr
    {'id': 'foo', 'hidden': True, 'class': 'bar'}
"""

import re
from typing import Dict, List, Optional

from ..config import AppSettings, appsettings
from ..models.header import DirectiveHeader, ParsedSpecs, Value
from .tokenizer import quotes_mask
from .log import LOG

SHORTHAND_RE = re.compile(r'([.#])([\w-]+)')
SHORTHAND_START_RE = re.compile(r'[.#]')
IDENT_RE = re.compile(r'[A-Za-z_:][\w:-]*')
INT_RE = re.compile(r'-?(?:0|[1-9]\d*)')
FLOAT_RE = re.compile(r'-?(?:0|[1-9]\d*)?\.\d+')


def attr_parse(shorthand: str) -> Dict[str, str]:
    """
    Expand .class#id shorthand into an attribute dict

    Fragments may appear in any order and any count. The last #id wins;
    .class fragments are space-joined in order of appearance. Text before
    the first fragment (a tag name) is ignored.

    Args:
        shorthand: Token such as '.bar#foo.baz' or 'list.tweets'

    Returns:
        Dict with 'id' and/or 'class', empty if there are no fragments

    Example:
        >>> attr_parse('.bar#foo.baz')
        {'id': 'foo', 'class': 'bar baz'}
    """
    attr: Dict[str, str] = {}
    classes = []

    for marker, value in SHORTHAND_RE.findall(shorthand):
        if marker == '#':
            attr['id'] = value
        else:
            classes.append(value)

    if classes:
        attr['class'] = ' '.join(classes)
    return attr


def specs_parse(token: str) -> ParsedSpecs:
    """
    Split a name token into tag name and shorthand attributes

    Example:
        >>> specs_parse('tabs.#foo.bar')
        ParsedSpecs(name='tabs', attr={'id': 'foo', 'class': 'bar'})
        >>> specs_parse('tabs')
        ParsedSpecs(name='tabs', attr={})
    """
    match = SHORTHAND_START_RE.search(token)
    if not match:
        return ParsedSpecs(name=token)
    return ParsedSpecs(name=token[:match.start()], attr=attr_parse(token[match.start():]))


def value_coerce(raw: str) -> Value:
    """
    Coerce a header value to its typed form

    'true'/'false' become booleans, integer and decimal patterns become
    numbers, everything else stays a string. Numbers with leading zeros
    ('007') are kept as strings.
    """
    if raw == 'true':
        return True
    if raw == 'false':
        return False
    if INT_RE.fullmatch(raw):
        return int(raw)
    if FLOAT_RE.fullmatch(raw):
        return float(raw)
    return raw


def header_parse(header: str, settings: Optional[AppSettings] = None) -> DirectiveHeader:
    """
    Parse one directive header into {name, attr, data}

    Token shapes after the name:
        "literal"       positional value, stored as data['_']
        key="literal"   coerced data value (or attribute for attribute keys)
        key=bareword    same, unquoted
        .class / #id    extra shorthand, composed with the name's shorthand
        flag            bare identifier, set to True
        other           bare positional such as /meow.png

    Class composition: shorthand classes first, explicit class= values after.
    Id: last one applied wins, left to right.

    Malformed input never raises here: an unterminated quote runs to the end
    of the header and a second positional value is ignored, both with a
    LOG() warning.

    Args:
        header: Header text without the outer brackets
        settings: Settings supplying the attribute-key set (defaults to appsettings)

    Returns:
        DirectiveHeader
    """
    settings = settings or appsettings
    masked = quotes_mask(header.strip())
    parsed = DirectiveHeader(name='')

    if header.count('"') % 2:
        LOG(f"Warning: unterminated quote in [{header}]", level=2)

    tokens = masked.skeleton.split()
    if not tokens:
        return parsed

    shorthand_classes: List[str] = []
    explicit_classes: List[str] = []

    def shorthand_apply(attr: Dict[str, str]) -> None:
        if 'class' in attr:
            shorthand_classes.extend(attr['class'].split())
        if 'id' in attr:
            parsed.attr['id'] = attr['id']

    def positional_set(value: str) -> None:
        if '_' in parsed.data:
            LOG(f"Warning: extra positional value '{value}' ignored in [{header}]", level=2)
            return
        parsed.data['_'] = value

    first, rest = tokens[0], tokens[1:]
    if masked.literal_get(first) is not None:
        # Header opens with a quoted literal: no name
        rest = tokens
    else:
        specs = specs_parse(masked.text_restore(first))
        parsed.name = specs.name
        shorthand_apply(specs.attr)

    for token in rest:
        literal = masked.literal_get(token)
        if literal is not None:
            positional_set(literal)

        elif token[0] in '.#':
            shorthand_apply(attr_parse(token))

        elif '=' in token and IDENT_RE.fullmatch(token.split('=', 1)[0]):
            key, raw = token.split('=', 1)
            literal = masked.literal_get(raw)
            text = literal if literal is not None else masked.text_restore(raw)
            value = value_coerce(text)

            if key == 'class':
                if text:
                    explicit_classes.append(text)
            elif settings.attributeKey_is(key):
                parsed.attr[key] = value if isinstance(value, bool) else text
            else:
                parsed.data[key] = value

        elif IDENT_RE.fullmatch(token):
            if settings.attributeKey_is(token):
                parsed.attr[token] = True
            else:
                parsed.data[token] = True

        else:
            positional_set(masked.text_restore(token))

    classes = shorthand_classes + explicit_classes
    if classes:
        parsed.attr['class'] = ' '.join(classes)

    return parsed
