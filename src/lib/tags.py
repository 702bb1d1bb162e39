"""
Built-in tag library

Each handler takes (data, options) and returns HTML. data holds the
coerced header values, 'attr' (id, class and boolean attributes) and
'content' (line groups, each renderable with lines_render()).

Tags are registered by category (layout, media, content, island).
"""

import json
import re
from typing import Any, Dict, List, Optional, Sequence

from ..models.blocks import BlockKind, BlockNode
from ..models.tags import TagSpec, TagCategory
from .blocks import blocks_parse
from .elements import elem, join, list_make, wrapper_apply
from .prose import inline_render
from .renderer import RenderOptions, lines_render, nodes_render

MIME_TYPES = {
    'jpg': 'image/jpeg',
    'jpeg': 'image/jpeg',
    'png': 'image/png',
    'gif': 'image/gif',
    'webp': 'image/webp',
    'avif': 'image/avif',
    'svg': 'image/svg+xml',
    'mov': 'video/mov',
    'webm': 'video/webm',
    'mp4': 'video/mp4',
    'ogv': 'video/ogg',
}

VIDEO_KEYS = ('autoplay', 'controls', 'loop', 'muted', 'playsinline', 'poster', 'preload', 'width', 'height')

# Markdown table delimiter row: ---|:---:|---
TABLE_RULE_RE = re.compile(r'\|?\s*:?-{3,}:?\s*(?:\|\s*:?-{3,}:?\s*)*\|?')

SECTION_KINDS = (BlockKind.LIST_ITEM, BlockKind.HEADING, BlockKind.CODE_FENCE)


def mimetype_get(path: str) -> str:
    """
    Media type from a file extension

    Example:
        >>> mimetype_get('/meow.mp4')
        'video/mp4'
        >>> mimetype_get('/photo.heic')
        'image/heic'
    """
    path = path.split('?', 1)[0].split('#', 1)[0]
    ext = path.rsplit('.', 1)[-1].lower() if '.' in path else ''
    return MIME_TYPES.get(ext, f'image/{ext}')


def flag_first(data: Dict[str, Any]) -> Optional[str]:
    """Name of the first bare flag (a data key set to True), if any"""
    return next((key for key, value in data.items() if value is True), None)


def classes_merge(*classes: Optional[str]) -> str:
    """Space-join class names, skipping empty ones"""
    return ' '.join(cls for cls in classes if cls)


def sections_split(nodes: Sequence[BlockNode], kinds: Sequence[BlockKind] = SECTION_KINDS) -> List[List[BlockNode]]:
    """
    Split sibling nodes into sections

    The first kind in kinds that occurs among the nodes starts a new
    section at each occurrence. Nodes before the first starter form a
    section of their own.
    """
    starter = next((kind for kind in kinds if any(node.kind is kind for node in nodes)), None)
    if starter is None:
        return [list(nodes)] if nodes else []

    sections: List[List[BlockNode]] = []
    for node in nodes:
        if node.kind is starter or not sections:
            sections.append([node])
        else:
            sections[-1].append(node)
    return sections


def section_render(section: Sequence[BlockNode], options: RenderOptions) -> str:
    """Render one section; a leading list item contributes its body only"""
    html_parts = []
    for node in section:
        if node.kind is BlockKind.LIST_ITEM:
            html_parts.append(nodes_render(node.children, options))
        else:
            html_parts.append(nodes_render([node], options))
    return ''.join(html_parts)


def sections_render(content: List[List[str]], options: RenderOptions) -> List[str]:
    """
    Render a tag's content as a list of sections

    Several --- groups are one section each; a single group is split by
    bullets, headings or code fences.
    """
    if len(content) > 1:
        return [lines_render(group, options) for group in content]
    nodes = blocks_parse(content[0]) if content else []
    return [section_render(section, options) for section in sections_split(nodes)]


# Layout tags

def container_handler(data: Dict[str, Any], options: RenderOptions) -> str:
    """[div] and anonymous [.class#id]: a <div> around the content"""
    content = data.get('content') or []
    if len(content) > 1:
        body = join(elem('div', lines_render(group, options)) for group in content)
    else:
        body = join(lines_render(group, options) for group in content)
    return elem('div', data.get('attr'), body)


def section_handler(data: Dict[str, Any], options: RenderOptions) -> str:
    """[section]: several groups become numbered block divs"""
    content = data.get('content') or []
    block_class = data.get('block_class') or 'block'

    blocks = []
    for index, group in enumerate(content):
        html = lines_render(group, options)
        if len(content) > 1:
            html = elem('div', {'class': f'{block_class} {block_class}-{index + 1}'}, html)
        blocks.append(html)

    return wrapper_apply(data, elem('section', data.get('attr'), join(blocks)))


def list_handler(data: Dict[str, Any], options: RenderOptions) -> str:
    """[list]: one <li> per section, items="cls" sets the item class"""
    items_class = data.get('items')
    item_attr = {'class': items_class} if isinstance(items_class, str) else None

    sections = sections_render(data.get('content') or [], options)
    items = [elem('li', item_attr, html) for html in sections]
    return wrapper_apply(data, elem('ul', data.get('attr'), join(items)))


def accordion_handler(data: Dict[str, Any], options: RenderOptions) -> str:
    """
    [accordion]: one <details> per heading

    The heading becomes the <summary>; what follows it, up to the next
    heading, is the body. Only the first panel renders with open set.
    """
    content = data.get('content') or []
    nodes = blocks_parse(content[0]) if content else []

    panels = []
    for section in sections_split(nodes, kinds=(BlockKind.HEADING,)):
        head, rest = section[0], section[1:]
        if head.kind is not BlockKind.HEADING:
            # Text before the first heading stays outside the panels
            panels.append(nodes_render(section, options))
            continue

        details_attr = {
            'name': data.get('name'),
            'open': bool(data.get('open')) and not any(p.startswith('<details') for p in panels),
        }
        summary = elem('summary', inline_render(head.header, options))
        body = elem('div', nodes_render(rest, options)) if rest else ''
        panels.append(elem('details', details_attr, summary + body))

    return wrapper_apply(data, elem('div', data.get('attr'), join(panels)))


def tabs_handler(data: Dict[str, Any], options: RenderOptions) -> str:
    """
    [tabs]: a nav of anchors and a <ul> of panes

    Tab labels come from the positional value or tabs= ("One | Two").
    Without them the first half of the groups are labels and the second
    half the panes.
    """
    attr = dict(data.get('attr') or {})
    name = data.get('name') or 'tab'
    content = data.get('content') or []

    titles = data.get('_') or data.get('tabs')
    if titles:
        labels = [inline_render(str(title), options) for title in list_make(titles)]
        panes = content
    else:
        half = (len(content) + 1) // 2
        labels = [inline_render(' '.join(group), options) for group in content[:half]]
        panes = content[half:]

    nav = join(
        elem('a', {'href': f'#{name}-{index + 1}'}, label)
        for index, label in enumerate(labels)
    )
    items = join(
        elem('li', {'id': f'{name}-{index + 1}'}, lines_render(group, options))
        for index, group in enumerate(panes)
    )

    section_attr = {'is': 'tagdown-tabs', **attr, 'class': classes_merge('tabs', attr.get('class'))}
    return wrapper_apply(data, elem('section', section_attr, elem('nav', nav) + elem('ul', items)))


def codetabs_handler(data: Dict[str, Any], options: RenderOptions) -> str:
    """
    [codetabs]: tabs whose panes are code fences

    types="js | python" names the language of each pane, type= the default.

    Raises:
        ValueError: No tab labels were given
    """
    if not data.get('_') and not data.get('tabs'):
        raise ValueError('[codetabs] requires tab labels: [codetabs "One | Two"]')

    types = list_make(data.get('types'))
    content = []
    for index, group in enumerate(data.get('content') or []):
        language = types[index] if index < len(types) else data.get('type') or ''
        content.append([f'``` {language}'.rstrip(), *group, '```'])

    return tabs_handler({**data, 'content': content}, options)


# Media tags

def image_handler(data: Dict[str, Any], options: RenderOptions) -> str:
    """
    [image]: <img>, or <picture> when a small= variant is given

    A caption (or body content) wraps the image in <figure>; href= wraps
    it in a link.
    """
    attr = data.get('attr') or {}
    caption = data.get('caption')
    content = data.get('content') or []

    if caption:
        aside = elem('figcaption', inline_render(str(caption), options))
    elif content:
        aside = elem('figcaption', lines_render(content[0], options))
    else:
        aside = ''

    img_attr = {
        'src': data.get('src') or data.get('_') or data.get('large'),
        'srcset': join(list_make(data.get('srcset')), ', '),
        'sizes': join(list_make(data.get('sizes')), ', '),
        'alt': data.get('alt') or caption,
        'loading': data.get('loading', 'lazy'),
        'width': data.get('width'),
        'height': data.get('height'),
    }

    if data.get('small'):
        img = picture_make(img_attr, data, None if aside else attr)
    else:
        if not aside:
            img_attr.update(attr)
        img = elem('img', img_attr)

    if data.get('href'):
        img = elem('a', {'href': data['href']}, img)

    return elem('figure', attr, img + aside) if aside else img


def picture_make(img_attr: Dict[str, Any], data: Dict[str, Any], attr: Optional[Dict[str, Any]]) -> str:
    """<picture> with a small source below the offset width and the large one above"""
    offset = data.get('offset', 768)
    sources = []
    for src, bound in ((data.get('small'), 'max'), (img_attr.get('src'), 'min')):
        if src:
            sources.append(elem('source', {
                'srcset': src,
                'media': f'({bound}-width: {offset}px)',
                'type': mimetype_get(str(src)),
            }))
    sources.append(elem('img', img_attr))
    return elem('picture', attr, join(sources))


def video_handler(data: Dict[str, Any], options: RenderOptions) -> str:
    """[video]: boolean media flags become attributes, content is the fallback"""
    src = data.get('_') or data.get('src')
    content = data.get('content') or []

    video_attr: Dict[str, Any] = {
        **(data.get('attr') or {}),
        'src': src,
        'type': mimetype_get(str(src)) if src else None,
    }
    for key in VIDEO_KEYS:
        if key in data:
            video_attr[key] = data[key]

    sources = [
        elem('source', {'src': source, 'type': mimetype_get(str(source))})
        for source in list_make(data.get('sources'))
    ]
    if content:
        sources.append(lines_render(content[0], options))

    return elem('video', video_attr, join(sources))


def media_handler(data: Dict[str, Any], options: RenderOptions) -> str:
    """[! path]: video or image, inferred from the file extension"""
    path = str(data.get('_') or data.get('src') or '')
    if data.get('sources') or mimetype_get(path).startswith('video'):
        return video_handler(data, options)
    return image_handler(data, options)


def icon_handler(data: Dict[str, Any], options: RenderOptions) -> str:
    """
    [icon name]: an SVG icon image from icon_base (default /img)

    A bare name such as [icon star] arrives as the flag star=True; the
    first flag is taken as the icon name when no positional is given.
    """
    name = data.get('_') or data.get('name') or flag_first(data)
    if not name:
        raise ValueError('[icon] requires an icon name: [icon star]')
    base = str(data.get('icon_base') or '/img').rstrip('/')
    return elem('img', {
        **(data.get('attr') or {}),
        'src': f'{base}/{name}.svg',
        'alt': data.get('alt') or f'{name} icon',
    })


# Content tags

def button_handler(data: Dict[str, Any], options: RenderOptions) -> str:
    """[button href="/" "Label"]: a link styled as a button"""
    label = data.get('label') or data.get('_')
    content = data.get('content') or []

    if label is not None:
        html = inline_render(str(label), options)
    elif content:
        html = inline_render('\n'.join(content[0]), options)
    else:
        html = ''

    return elem('a', {**(data.get('attr') or {}), 'href': data.get('href'), 'role': 'button'}, html)


def rows_parse(lines: Sequence[str]) -> List[List[str]]:
    """Table rows from 'a | b' lines; delimiter rows are skipped"""
    rows = []
    for line in lines:
        stripped = line.strip()
        if not stripped or TABLE_RULE_RE.fullmatch(stripped):
            continue
        rows.append([cell.strip() for cell in stripped.strip('|').split('|')])
    return rows


def table_handler(data: Dict[str, Any], options: RenderOptions) -> str:
    """
    [table]: rows from rows=/items= data, nested YAML, or 'a | b' lines

    The first row is the header row unless head=false.
    """
    rows = data.get('rows') or data.get('items')
    content = data.get('content') or []
    if rows is None and content:
        rows = rows_parse(content[0])

    head = data.get('head', True) is not False

    table_rows = []
    for index, row in enumerate(list_make(rows)):
        cell_tag = 'th' if head and index == 0 else 'td'
        cells = (
            elem(cell_tag, inline_render(str(cell), options) if cell is not None else '')
            for cell in list_make(row)
        )
        table_rows.append(elem('tr', ''.join(cells)))

    return wrapper_apply(data, elem('table', data.get('attr'), join(table_rows)))


# Island tags

def island_handler(data: Dict[str, Any], options: RenderOptions, name: str = '') -> str:
    """
    [my-widget]: a client-side custom element

    Tag data is embedded as JSON for the component to hydrate from; the
    content renders inside the element.
    """
    payload = {key: value for key, value in data.items() if key not in ('attr', 'content')}
    script = ''
    if payload:
        # '</' would end the script element early
        text = json.dumps(payload, default=str).replace('</', '<\\/')
        script = elem('script', {'type': 'application/json'}, text)

    body = join(lines_render(group, options) for group in data.get('content') or [])
    return elem(name, {**(data.get('attr') or {}), 'custom': name}, script + body)


def layoutTags_register(registry: Any) -> None:
    """Register layout tags"""
    registry.register(TagSpec(
        name='div',
        category=TagCategory.LAYOUT,
        description='Generic container, also used for anonymous [.class#id] tags',
        handler=container_handler,
        nested_data=False,
        examples=['[.note]\n  ## Note\n  Hello', '[div.stack]\n  Hey\n  ---\n  Girl'],
    ))

    registry.register(TagSpec(
        name='section',
        category=TagCategory.LAYOUT,
        description='Section element; --- groups become numbered block divs',
        handler=section_handler,
        nested_data=False,
        examples=['[section.hero]\n  # Welcome\n  ---\n  [image /hero.png]'],
    ))

    registry.register(TagSpec(
        name='list',
        category=TagCategory.LAYOUT,
        description='Unordered list split by bullets, headings or code fences',
        handler=list_handler,
        nested_data=False,
        examples=['[list]\n  * foo\n  * bar', '[list.features items="card"]\n  ## One\n  ## Two'],
    ))

    registry.register(TagSpec(
        name='accordion',
        category=TagCategory.LAYOUT,
        description='Collapsible <details> panels, one per heading',
        handler=accordion_handler,
        nested_data=False,
        examples=['[accordion name="faq" open]\n  ## Question\n  Answer'],
    ))

    registry.register(TagSpec(
        name='tabs',
        category=TagCategory.LAYOUT,
        description='Tabbed panes with a nav of anchors',
        handler=tabs_handler,
        nested_data=False,
        examples=['[tabs "One | Two"]\n  First pane\n  ---\n  Second pane'],
    ))

    registry.register(TagSpec(
        name='codetabs',
        category=TagCategory.LAYOUT,
        description='Tabs whose panes are code fences',
        handler=codetabs_handler,
        nested_data=False,
        examples=['[codetabs "JS | Python" types="js | python"]\n  alert(1)\n  ---\n  print(1)'],
    ))


def mediaTags_register(registry: Any) -> None:
    """Register media tags"""
    registry.register(TagSpec(
        name='image',
        category=TagCategory.MEDIA,
        description='Image, responsive picture or figure',
        handler=image_handler,
        examples=['[image /meow.png]', '[image caption="Hello"]\n  small: small.png\n  large: large.png'],
        aliases=['img'],
    ))

    registry.register(TagSpec(
        name='video',
        category=TagCategory.MEDIA,
        description='Video element with sources and media flags',
        handler=video_handler,
        nested_data=False,
        examples=['[video /meow.mp4 autoplay loop muted]'],
    ))

    registry.register(TagSpec(
        name='!',
        category=TagCategory.MEDIA,
        description='Image or video, inferred from the file extension',
        handler=media_handler,
        examples=['[! /meow.png]', '[! /meow.mp4 autoplay]'],
    ))

    registry.register(TagSpec(
        name='icon',
        category=TagCategory.MEDIA,
        description='SVG icon from the icon directory',
        handler=icon_handler,
        examples=['[icon github]'],
    ))


def contentTags_register(registry: Any) -> None:
    """Register content tags"""
    registry.register(TagSpec(
        name='button',
        category=TagCategory.CONTENT,
        description='Link styled as a button',
        handler=button_handler,
        nested_data=False,
        examples=['[button href="/" "Hey, *world*"]'],
    ))

    registry.register(TagSpec(
        name='table',
        category=TagCategory.CONTENT,
        description='Table from data rows or pipe-separated lines',
        handler=table_handler,
        examples=['[table]\n  Name | Age\n  Ann | 31', '[table :rows="people" head=false]'],
    ))


def islandTags_register(registry: Any) -> None:
    """Register the custom element wildcard"""
    registry.register(TagSpec(
        name='*-*',
        category=TagCategory.ISLAND,
        description='Client-side custom element; tag data is embedded as JSON',
        handler=island_handler,
        is_wildcard=True,
        examples=['[contact-me]\n  cta: Submit'],
    ))


def builtins_register(registry: Any) -> None:
    """Register every built-in tag"""
    layoutTags_register(registry)
    mediaTags_register(registry)
    contentTags_register(registry)
    islandTags_register(registry)
