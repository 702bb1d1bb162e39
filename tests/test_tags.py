"""
Built-in tag tests

Tests each built-in tag end to end: layout, media, content and custom
element islands.
"""

import pytest

from tagdown import markup_render, lines_render, RenderOptions
from tagdown.config import AppSettings
from tagdown.lib.errors import UnresolvedTagError
from tagdown.lib.tags import mimetype_get


class TestLayoutTags:
    """Test div, section, list, accordion, tabs and codetabs"""

    def test_div_with_id(self):
        """Explicit [div] keeps shorthand attributes"""
        assert markup_render('[div#main]\n  Hi') == '<div id="main"><p>Hi</p></div>'

    def test_section_blocks(self):
        """Several groups become numbered block divs"""
        html = markup_render('[section.hero]\n  # Hi\n  ---\n  Text')
        assert html == (
            '<section class="hero">'
            '<div class="block block-1"><h1>Hi</h1></div>'
            '<div class="block block-2"><p>Text</p></div>'
            '</section>'
        )

    def test_list_split_by_headings(self):
        """Headings start new items; items= sets the item class"""
        source = '\n'.join([
            '[list.features items="card"]',
            '  ## Something',
            '  Described here',
            '  ## Another',
            '  Described here',
        ])
        assert markup_render(source) == (
            '<ul class="features">'
            '<li class="card"><h2>Something</h2><p>Described here</p></li>'
            '<li class="card"><h2>Another</h2><p>Described here</p></li>'
            '</ul>'
        )

    def test_list_split_by_code_fences(self):
        """Code fences start new items"""
        html = markup_render('[list]\n  ``` .foo\n  ```\n  ``` .bar\n  ```')
        assert html == (
            '<ul>'
            '<li><div class="foo"><pre><code></code></pre></div></li>'
            '<li><div class="bar"><pre><code></code></pre></div></li>'
            '</ul>'
        )

    def test_list_split_by_groups(self):
        """Without bullets, headings or fences, groups are the items"""
        html = markup_render('[list]\n  One\n  ---\n  Two')
        assert html == '<ul><li><p>One</p></li><li><p>Two</p></li></ul>'

    def test_list_wrapper(self):
        """wrapper= wraps the output in a classed div"""
        html = markup_render('[list wrapper="w"]\n  * a')
        assert html == '<div class="w"><ul><li><p>a</p></li></ul></div>'

    def test_accordion(self):
        """One details panel per heading, only the first open"""
        source = '[accordion name="faq" open]\n  ## A\n  Answer A\n  ## B\n  Answer B'
        assert markup_render(source) == (
            '<div>'
            '<details name="faq" open><summary>A</summary><div><p>Answer A</p></div></details>'
            '<details name="faq"><summary>B</summary><div><p>Answer B</p></div></details>'
            '</div>'
        )

    def test_tabs(self):
        """Labels become nav anchors, groups become panes"""
        html = markup_render('[tabs "One | Two"]\n  First\n  ---\n  Second')
        assert html == (
            '<section is="tagdown-tabs" class="tabs">'
            '<nav><a href="#tab-1">One</a><a href="#tab-2">Two</a></nav>'
            '<ul><li id="tab-1"><p>First</p></li><li id="tab-2"><p>Second</p></li></ul>'
            '</section>'
        )

    def test_tabs_labels_from_groups(self):
        """Without labels, the first half of the groups are the labels"""
        html = markup_render('[tabs.big name="t"]\n  A\n  ---\n  B\n  ---\n  Pane A\n  ---\n  Pane B')
        assert '<section is="tagdown-tabs" class="tabs big">' in html
        assert '<nav><a href="#t-1">A</a><a href="#t-2">B</a></nav>' in html
        assert '<li id="t-2"><p>Pane B</p></li>' in html

    def test_codetabs(self):
        """Each pane is rendered as a code fence"""
        html = markup_render('[codetabs "JS | Py"]\n  alert(1)\n  ---\n  print(1)')
        assert '<a href="#tab-1">JS</a>' in html
        assert '<li id="tab-1"><pre><code>alert(1)</code></pre></li>' in html
        assert '<li id="tab-2"><pre><code>print(1)</code></pre></li>' in html

    def test_codetabs_requires_labels(self):
        """codetabs without tab labels raises"""
        with pytest.raises(ValueError):
            markup_render('[codetabs]\n  alert(1)')


class TestMediaTags:
    """Test image, video, the ! shortcut and icons"""

    def test_image(self):
        """Positional value is the source"""
        assert markup_render('[image /meow.png]') == '<img src="/meow.png" loading="lazy">'

    def test_image_attributes(self):
        """Without a caption, attributes go on the img"""
        html = markup_render('[image.hero /a.png width=300]')
        assert html == '<img src="/a.png" loading="lazy" width="300" class="hero">'

    def test_image_caption(self):
        """A caption wraps the image in a figure"""
        html = markup_render('[image /a.png caption="Hi"]')
        assert html == '<figure><img src="/a.png" alt="Hi" loading="lazy"><figcaption>Hi</figcaption></figure>'

    def test_picture_from_nested_data(self):
        """small/large variants in YAML build a picture element"""
        source = '\n'.join([
            '[image caption="Hello"]',
            '  href: /',
            '  small: small.png',
            '  large: large.png',
        ])
        assert markup_render(source) == (
            '<figure><a href="/"><picture>'
            '<source srcset="small.png" media="(max-width: 768px)" type="image/png">'
            '<source srcset="large.png" media="(min-width: 768px)" type="image/png">'
            '<img src="large.png" alt="Hello" loading="lazy">'
            '</picture></a><figcaption>Hello</figcaption></figure>'
        )

    def test_video_with_content(self):
        """Boolean flags become attributes, content renders inside"""
        html = markup_render('[video /meow.mp4 autoplay]\n  ### Hey')
        assert html == '<video src="/meow.mp4" type="video/mp4" autoplay><h3>Hey</h3></video>'

    def test_video_fallback_with_colon(self):
        """Fallback text is never read as data"""
        html = markup_render('[video /a.mp4]\n  Sorry: no video support')
        assert html == '<video src="/a.mp4" type="video/mp4"><p>Sorry: no video support</p></video>'

    def test_video_flags(self):
        """loop and muted are boolean attributes"""
        html = markup_render('[video src="/a.mp4" loop muted]')
        assert html == '<video src="/a.mp4" type="video/mp4" loop muted></video>'

    def test_shortcut_video(self):
        """[!] picks video for video extensions"""
        html = markup_render('[! /meow.mp4 autoplay]')
        assert html == '<video src="/meow.mp4" type="video/mp4" autoplay></video>'

    def test_shortcut_image(self):
        """[!] picks image for anything else"""
        assert markup_render('[! /meow.png]') == '<img src="/meow.png" loading="lazy">'

    def test_icon(self):
        """Icons are SVG images"""
        assert markup_render('[icon star]') == '<img src="/img/star.svg" alt="star icon">'

    def test_icon_quoted_name(self):
        """A quoted positional name works like the bare one"""
        assert markup_render('[icon "star"]') == '<img src="/img/star.svg" alt="star icon">'

    def test_icon_base(self):
        """icon_base replaces the /img directory"""
        html = markup_render('[icon check icon_base="/icons/"]')
        assert html == '<img src="/icons/check.svg" alt="check icon">'

    def test_icon_without_name(self):
        """An icon with nothing to name it is an error"""
        with pytest.raises(ValueError):
            markup_render('[icon]')

    def test_mimetypes(self):
        """Known extensions map to their type, others to image/<ext>"""
        assert mimetype_get('/a.mp4') == 'video/mp4'
        assert mimetype_get('/a.ogv') == 'video/ogg'
        assert mimetype_get('/a.JPG') == 'image/jpeg'
        assert mimetype_get('/a.svg?v=2') == 'image/svg+xml'
        assert mimetype_get('/photo.heic') == 'image/heic'


class TestContentTags:
    """Test button and table"""

    def test_button(self):
        """Positional label is inline markdown"""
        html = markup_render('[button href="/" "Hey, *world*"]')
        assert html == '<a href="/" role="button">Hey, <em>world</em></a>'

    def test_button_label_from_body(self):
        """A body line with a colon is label text, not data"""
        html = markup_render('[button href="/"]\n  Note: click here')
        assert html == '<a href="/" role="button">Note: click here</a>'

    def test_table_from_lines(self):
        """Pipe-separated lines become rows, the first a header row"""
        html = markup_render('[table]\n  a | b\n  c | d')
        assert html == '<table><tr><th>a</th><th>b</th></tr><tr><td>c</td><td>d</td></tr></table>'

    def test_table_without_head(self):
        """head=false makes every row a body row"""
        html = markup_render('[table head=false]\n  a | b')
        assert html == '<table><tr><td>a</td><td>b</td></tr></table>'

    def test_table_skips_delimiter_row(self):
        """Markdown delimiter rows are ignored"""
        html = markup_render('[table]\n  Name | Age\n  --- | ---\n  Ann | 31')
        assert html == '<table><tr><th>Name</th><th>Age</th></tr><tr><td>Ann</td><td>31</td></tr></table>'

    def test_table_from_yaml(self):
        """A YAML sequence of rows is the table data"""
        html = markup_render('[table wrapper="tw"]\n  - [a, b]\n  - [c, d]')
        assert html == (
            '<div class="tw"><table>'
            '<tr><th>a</th><th>b</th></tr><tr><td>c</td><td>d</td></tr>'
            '</table></div>'
        )


class TestIslandTags:
    """Test hyphenated custom elements"""

    def test_island_with_data(self):
        """Tag data is embedded as JSON"""
        html = markup_render('[contact-me]\n  cta: Submit')
        assert html == (
            '<contact-me custom="contact-me">'
            '<script type="application/json">{"cta": "Submit"}</script>'
            '</contact-me>'
        )

    def test_island_script_escaped(self):
        """Data cannot close the script element early"""
        html = markup_render('[my-el note="</script>"]')
        assert '<\\/script>' in html
        assert html.count('</script>') == 1

    def test_islands_disabled(self):
        """With custom elements off, hyphenated names are unresolved"""
        options = RenderOptions.options_make(settings=AppSettings(custom_elements=False))
        with pytest.raises(UnresolvedTagError):
            lines_render(['[contact-me]'], options)
