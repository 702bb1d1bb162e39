"""
Dispatch and composition tests

Tests the default rendering rules, handler resolution, nested YAML data,
data references and error propagation, end to end from source text.
"""

import pytest

from tagdown import markup_render, lines_render, RenderOptions, TagRegistry
from tagdown.lib.errors import UnresolvedTagError
from tagdown.config import AppSettings
from tagdown.lib.prose import tags_restore
from tagdown.lib.renderer import nested_load


class TestDefaultRules:
    """Test rendering of non-directive nodes"""

    def test_paragraph(self):
        """Prose goes through markdown"""
        assert markup_render('Hello *world*') == '<p>Hello <em>world</em></p>'

    def test_heading(self):
        """Headings render inline markdown"""
        assert markup_render('## Hello **there**') == '<h2>Hello <strong>there</strong></h2>'

    def test_bullets_wrapped_in_ul(self):
        """Adjacent items share one <ul>"""
        assert markup_render('* foo\n* bar') == '<ul><li><p>foo</p></li><li><p>bar</p></li></ul>'

    def test_no_separator_between_nodes(self):
        """Node outputs are concatenated directly"""
        assert markup_render('# Title\n\nText') == '<h1>Title</h1><p>Text</p>'

    def test_rule_groups_joined_with_hr(self):
        """Top-level rules become thematic breaks"""
        assert markup_render('One\n---\nTwo') == '<p>One</p><hr><p>Two</p>'

    def test_code_fence_plain(self):
        """A fence without a language is escaped, not highlighted"""
        html = markup_render('```\n<b>bold</b>\n```')
        assert html == '<pre><code>&lt;b&gt;bold&lt;/b&gt;</code></pre>'

    def test_code_fence_highlighted(self):
        """A fence naming a language goes through Pygments"""
        html = markup_render('``` python\nprint("hi")\n```')
        assert html.startswith('<div class="highlight"')
        assert 'print' in html

    def test_code_fence_shorthand_wrapper(self):
        """Shorthand in the info string wraps the block in a div"""
        html = markup_render('``` .demo\ncode\n```')
        assert html == '<div class="demo"><pre><code>code</code></pre></div>'

    def test_rendering_is_idempotent(self):
        """Rendering a directive-free document twice is byte-identical"""
        source = '# Title\n\nSome *text*\n\n* a\n* b\n\n```\ncode\n```'
        assert markup_render(source) == markup_render(source)


class TestDispatch:
    """Test handler resolution and invocation"""

    def test_list_directive(self):
        """[list] renders its bullets as <li> in order"""
        html = lines_render(['[list]', '  * foo', '  * bar'])
        assert html == '<ul><li><p>foo</p></li><li><p>bar</p></li></ul>'

    def test_anonymous_container(self):
        """Anonymous tags render as the default container"""
        html = markup_render('[.note]\n  ## Note\n  Hello')
        assert html == '<div class="note"><h2>Note</h2><p>Hello</p></div>'

    def test_anonymous_groups(self):
        """Several groups in a container are wrapped individually"""
        html = markup_render('[.stack]\n  Hey\n  ---\n  Girl')
        assert html == '<div class="stack"><div><p>Hey</p></div><div><p>Girl</p></div></div>'

    def test_unresolved_tag_raises(self):
        """An unknown name is an error, never silently dropped"""
        with pytest.raises(UnresolvedTagError) as excinfo:
            markup_render('Intro\n\n[nope x=1]')
        assert excinfo.value.name == 'nope'
        assert excinfo.value.line_number == 3
        assert 'nope' in str(excinfo.value)

    def test_nested_unresolved_line_number(self):
        """Errors in nested content report the document line"""
        with pytest.raises(UnresolvedTagError) as excinfo:
            markup_render('Intro\n\n[section]\n  para\n\n  [nope]')
        assert excinfo.value.line_number == 6

    def test_grouped_unresolved_line_number(self):
        """Line numbers survive --- groups and list items"""
        source = '\n'.join([
            '[div]',
            '  One',
            '  ---',
            '',
            '  * item',
            '',
            '    [nope]',
        ])
        with pytest.raises(UnresolvedTagError) as excinfo:
            markup_render(source)
        assert excinfo.value.line_number == 7

    def test_custom_tag(self):
        """Caller tags receive data, attr and content"""
        def greet(data, options):
            return f'<b class="{data["attr"]["class"]}">{data["_"]} x{data["times"]}</b>'

        html = markup_render('[greet.big "Hi" times=2]', tags={'greet': greet})
        assert html == '<b class="big">Hi x2</b>'

    def test_custom_tag_overrides_builtin(self):
        """Extensions win over built-ins of the same name"""
        html = markup_render('[image /a.png]', tags={'image': lambda data, options: 'IMG'})
        assert html == 'IMG'

    def test_handler_output_verbatim(self):
        """Handler HTML is not escaped or reformatted"""
        html = markup_render('[raw]', tags={'raw': lambda data, options: '<x-raw> a  b </x-raw>'})
        assert html == '<x-raw> a  b </x-raw>'

    def test_handler_recursion(self):
        """Handlers render their content with lines_render"""
        def card(data, options):
            return '<article>' + ''.join(lines_render(g, options) for g in data['content']) + '</article>'

        html = markup_render('[card]\n  [.inner]\n    Text', tags={'card': card})
        assert html == '<article><div class="inner"><p>Text</p></div></article>'

    def test_handler_error_propagates(self):
        """Handler exceptions reach the caller unchanged"""
        def broken(data, options):
            raise KeyError('missing')

        with pytest.raises(KeyError):
            markup_render('[broken]', tags={'broken': broken})

    def test_content_groups(self):
        """A --- in the body splits content into groups"""
        seen = {}

        def capture(data, options):
            seen['content'] = data['content']
            return ''

        markup_render('[capture]\n  # A\n  ---\n  # B', tags={'capture': capture})
        assert seen['content'] == [['# A'], ['# B']]

    def test_empty_body_content(self):
        """A directive without a body gets empty content"""
        seen = {}

        def capture(data, options):
            seen.update(data)
            return ''

        markup_render('[capture]', tags={'capture': capture})
        assert seen == {'attr': {}, 'content': []}

    def test_options_not_mutated(self):
        """Rendering leaves caller registries and data untouched"""
        tags = {'x': lambda data, options: 'x'}
        data = {'rows': [['a']]}
        options = RenderOptions.options_make(tags=tags, data=data)
        names = set(options.registry.specs)

        lines_render(['[x]', '[table :rows="rows"]'], options)
        assert set(options.registry.specs) == names
        assert tags == {'x': tags['x']}
        assert data == {'rows': [['a']]}


class TestNestedData:
    """Test YAML bodies and data references"""

    def test_yaml_mapping_merged(self):
        """A YAML mapping body becomes tag data"""
        seen = {}

        def capture(data, options):
            seen.update(data)
            return ''

        markup_render('[capture size=3]\n  title: Hello\n  size: 1', tags={'capture': capture})
        assert seen == {'title': 'Hello', 'size': 3, 'attr': {}, 'content': []}

    def test_yaml_sequence_becomes_items(self):
        """A YAML list body becomes items"""
        seen = {}

        def capture(data, options):
            seen.update(data)
            return ''

        markup_render('[capture]\n  - one\n  - two', tags={'capture': capture})
        assert seen['items'] == ['one', 'two']

    def test_markup_body_not_yaml(self):
        """Ordinary markup is never read as data"""
        assert nested_load(['## Title', 'Text: here']) is None

    def test_prose_after_entry_not_yaml(self):
        """A body is data only when every outer line is an entry"""
        assert nested_load(['Note: this', 'plain sentence']) is None
        assert nested_load(['title: Hi', 'meta:', '  size: 1']) == {'title': 'Hi', 'meta': {'size': 1}}

    def test_invalid_yaml_falls_back(self):
        """Broken YAML is left as markup"""
        assert nested_load(['key: [unclosed']) is None

    def test_data_reference(self):
        """:key="name" pulls the value from options.data"""
        html = markup_render(
            '[table :rows="people"]',
            data={'people': [['Name', 'Age'], ['Ann', 31]]},
        )
        assert html == '<table><tr><th>Name</th><th>Age</th></tr><tr><td>Ann</td><td>31</td></tr></table>'

    def test_unknown_reference_kept_raw(self):
        """An unknown reference keeps its raw value"""
        seen = {}

        def capture(data, options):
            seen.update(data)
            return ''

        markup_render('[capture :rows="missing"]', tags={'capture': capture})
        assert seen['rows'] == 'missing'


class TestInlineTags:
    """Test tags inside prose"""

    def test_inline_tag(self):
        """Registered names inside a paragraph are rendered in place"""
        def print_tag(data, options):
            return f'<b>{data["value"]}</b>'

        html = markup_render('Value: [print value="110"]', tags={'print': print_tag})
        assert html == '<p>Value: <b>110</b></p>'

    def test_unknown_bracket_text_stays(self):
        """Unregistered bracket text is plain prose"""
        assert markup_render('See [note one] here') == '<p>See [note one] here</p>'

    def test_links_untouched(self):
        """Markdown links are not tags"""
        assert markup_render('A [link](/x) here') == '<p>A <a href="/x">link</a> here</p>'

    def test_inline_tag_in_heading(self):
        """Inline tags work in heading text"""
        html = markup_render('# Hi [icon star]')
        assert html == '<h1>Hi <img src="/img/star.svg" alt="star icon"></h1>'

    def test_code_span_stays_literal(self):
        """Tags inside backticks are shown, not rendered"""
        html = markup_render('Use `[button "Go"]` to add a button')
        assert 'role="button"' not in html
        assert '<code>[button &quot;Go&quot;]</code>' in html

    def test_tag_after_code_span(self):
        """Tags outside a code span still render"""
        html = markup_render('Run `make` then [icon star]')
        assert html == '<p>Run <code>make</code> then <img src="/img/star.svg" alt="star icon"></p>'

    def test_restore_by_index(self):
        """Each placeholder gets the output at its own index"""
        settings = AppSettings()
        html = f'<p>{settings.placeHolder_make(1)} {settings.placeHolder_make(0)}</p>'
        assert tags_restore(html, ['a', 'b'], settings) == '<p>b a</p>'


class TestRenderOptions:
    """Test RenderOptions composition"""

    def test_builtins_present(self):
        """Default options carry the built-in tags"""
        options = RenderOptions.options_make()
        assert options.registry.spec_get('image') is not None
        assert options.verbosity == 1

    def test_verbosity_override(self):
        """Explicit verbosity wins over settings"""
        options = RenderOptions.options_make(verbosity=3)
        assert options.verbosity == 3

    def test_registry_extension(self):
        """A TagRegistry can be passed as extensions"""
        extra = TagRegistry().merge({'y': lambda data, options: 'Y'})
        options = RenderOptions.options_make(tags=extra)
        assert options.registry.get('y') is not None
        assert options.registry.get('image') is not None
        assert lines_render(['[y]'], options) == 'Y'
