"""
Dispatch and composition

Walks the BlockNodes of a document and turns each one into HTML. Default
rules cover headings, prose, list items, code fences and rule groups;
directives are dispatched to the handler resolved from the registry in
RenderOptions.

Recursion is explicit: handlers call lines_render() on their content
groups, which segments and renders them with the same options.

Example:
    >>> markup_render('[.note]\\n  ## Note\\n  Hello')
    '<div class="note"><h2>Note</h2><p>Hello</p></div>'
"""

import re
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import yaml

from ..models.blocks import BlockKind, BlockNode
from ..models.header import DirectiveHeader
from ..models.options import RenderOptions
from ..models.tags import TagSpec
from .blocks import blocks_parse, groups_split, indent_base, indent_get
from .elements import elem, join
from .errors import UnresolvedTagError
from .header import header_parse
from .highlight import fence_render
from .log import LOG, options_connectToLogger, options_disconnect
from .prose import inline_render, prose_render

# A nested YAML mapping entry ('key: value') or sequence item ('- item')
YAML_START_RE = re.compile(r'(?:[\w.-]+:(?:\s|$)|-(?:\s|$))')


def markup_render(
    text: str,
    tags: Optional[Mapping[str, Any]] = None,
    data: Optional[Mapping[str, Any]] = None,
    verbosity: Optional[int] = None,
) -> str:
    """
    Render a tagdown document given as one string

    Args:
        text: Document source
        tags: Extra tags layered over the built-ins (see TagRegistry.merge)
        data: Values for :key="name" header references
        verbosity: Logging verbosity override

    Returns:
        HTML string
    """
    options = RenderOptions.options_make(tags=tags, data=data, verbosity=verbosity)
    return lines_render(text.splitlines(), options)


def lines_render(lines: Sequence[str], options: Optional[RenderOptions] = None) -> str:
    """
    Segment and render a collection of lines

    This is the recursion entry point handlers use for their content groups.

    Args:
        lines: Ordered source lines; a LineGroup keeps its document line
               offset, so nested errors report absolute line numbers
        options: Render options; built-ins only when omitted

    Returns:
        Concatenated HTML of every top-level node

    Raises:
        UnresolvedTagError: A directive names a tag that does not resolve
    """
    options = options or RenderOptions.options_make()
    token = options_connectToLogger(options)
    try:
        nodes = blocks_parse(lines)
        LOG(f"Rendering {len(nodes)} blocks", level=3)
        return nodes_render(nodes, options)
    finally:
        options_disconnect(token)


def nodes_render(nodes: Sequence[BlockNode], options: RenderOptions) -> str:
    """
    Render sibling nodes in order

    Runs of adjacent list items are wrapped in one <ul>; rule groups are
    separated by <hr>.
    """
    html_parts: List[str] = []
    items: List[BlockNode] = []

    for node in nodes:
        if node.kind is BlockKind.LIST_ITEM:
            items.append(node)
            continue

        if items:
            html_parts.append(items_render(items, options))
            items = []

        if node.kind is BlockKind.RULE_GROUP and html_parts:
            html_parts.append('<hr>')
        html_parts.append(node_render(node, options))

    if items:
        html_parts.append(items_render(items, options))

    return ''.join(html_parts)


def items_render(items: Sequence[BlockNode], options: RenderOptions) -> str:
    """Render adjacent list items as one <ul>"""
    return elem('ul', join(node_render(item, options) for item in items))


def node_render(node: BlockNode, options: RenderOptions) -> str:
    """Render a single node by its kind"""
    if node.kind is BlockKind.DIRECTIVE:
        return directive_render(node, options)

    if node.kind is BlockKind.HEADING:
        return elem(f'h{node.level}', inline_render(node.header, options))

    if node.kind is BlockKind.PROSE:
        return prose_render(node.content, options)

    if node.kind is BlockKind.CODE_FENCE:
        return fence_render(node, options.settings)

    if node.kind is BlockKind.LIST_ITEM:
        return elem('li', nodes_render(node.children, options))

    # RULE_GROUP
    return nodes_render(node.children, options)


def directive_render(node: BlockNode, options: RenderOptions) -> str:
    """
    Dispatch a DIRECTIVE node to its tag handler

    Handler exceptions are not caught here; they reach the caller as raised.

    Raises:
        UnresolvedTagError: Nothing in the registry renders this header
    """
    header = header_parse(node.header, options.settings)
    spec = options.registry.spec_resolve(header, options.settings)
    if spec is None:
        raise UnresolvedTagError(header.name, node.line_number, node.header)

    if header.anonymous_is() and '_' in header.data:
        LOG(
            f"Warning: positional value ignored by anonymous tag [{node.header}] "
            f"at line {node.line_number}",
            level=2,
        )

    LOG(f"Dispatch [{header.name or spec.name}] at line {node.line_number}", level=3)
    data = data_build(header, node.content, spec, options)
    return spec.handler_bind(header.name)(data, options)


def data_build(
    header: DirectiveHeader,
    body: Sequence[str],
    spec: TagSpec,
    options: RenderOptions,
) -> Dict[str, Any]:
    """
    Assemble the handler input for one directive

    Later sources win: nested YAML data, then header data (with :key
    references resolved), then attr and content.

    Args:
        header: Parsed directive header
        body: Directive body lines (dedented)
        spec: Resolved tag spec
        options: Active render options

    Returns:
        Dict with 'attr', 'content' and the tag's data keys
    """
    data: Dict[str, Any] = {}
    content: List[List[str]] = groups_split(body) if body else []

    nested = nested_load(body) if spec.nested_data and body else None
    if isinstance(nested, dict):
        data.update({str(key): value for key, value in nested.items()})
        content = []
    elif isinstance(nested, list):
        data['items'] = nested
        content = []

    data.update(references_resolve(header.data, options))
    data['attr'] = dict(header.attr)
    data['content'] = content
    return data


def nested_load(lines: Sequence[str]) -> Union[Dict[Any, Any], List[Any], None]:
    """
    Read a directive body as YAML data

    Only bodies whose every outermost line is a mapping entry or a
    sequence item are tried; deeper lines continue the entry above them.
    'Note: click here' followed by prose stays markup. Invalid YAML is
    logged and left to render as markup.

    Returns:
        The loaded mapping or sequence, or None when the body is markup
    """
    base = indent_base(lines)
    entries = [line.strip() for line in lines if line.strip() and indent_get(line) == base]
    if not entries or not all(YAML_START_RE.match(entry) for entry in entries):
        return None

    try:
        value = yaml.safe_load('\n'.join(lines))
    except yaml.YAMLError as e:
        LOG(f"Warning: nested data is not valid YAML, rendering as markup: {e}", level=2)
        return None

    return value if isinstance(value, (dict, list)) else None


def references_resolve(values: Mapping[str, Any], options: RenderOptions) -> Dict[str, Any]:
    """
    Resolve :key="name" references against options.data

    ':rows="table1"' becomes 'rows' holding options.data['table1']. An
    unknown name keeps its raw string, with a warning.
    """
    resolved: Dict[str, Any] = {}
    for key, value in values.items():
        if not key.startswith(':') or len(key) == 1:
            resolved[key] = value
            continue

        name = key[1:]
        reference = str(value)
        if reference in options.data:
            resolved[name] = options.data[reference]
        else:
            LOG(f"Warning: unknown data reference :{name}=\"{reference}\"", level=2)
            resolved[name] = value

    return resolved
