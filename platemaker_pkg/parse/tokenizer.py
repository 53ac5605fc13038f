"""
mistune setup for article sources: TOML frontmatter and in-place footnotes.
"""

import re

import mistune
from mistune.plugins.footnotes import INLINE_FOOTNOTE, REF_FOOTNOTE

FRONTMATTER_PATTERN = (
    r'^\+{3}[ \t]*\n'
    r'(?P<frontmatter_body>(?:[^\n]*\n)*?)'
    r'\+{3}[ \t]*$'
)

DEFINITIONS_KEY = 'footnote_definitions'


def parse_frontmatter(block, m, state):
    # Only the first block of the document can be frontmatter.
    if m.start() != 0 or state.depth() > 0 or state.env.get('frontmatter_seen'):
        return None

    state.env['frontmatter_seen'] = True
    state.append_token({'type': 'frontmatter', 'raw': m.group('frontmatter_body')})
    return m.end() + 1


def frontmatter(md):
    """Recognise a ``+++`` delimited block at the very start of the document."""
    md.block.register('frontmatter', FRONTMATTER_PATTERN, parse_frontmatter, before='fenced_code')


def _dedent_definition(text):
    lines = text.splitlines()
    second_line = None
    for second_line in lines[1:]:
        if second_line:
            break

    if second_line:
        spaces = len(second_line) - len(second_line.lstrip())
        text = re.sub(r'^ {' + str(spaces) + r',}', '', text, flags=re.M)
    return text.strip() + '\n'


def parse_footnote_definition(block, m, state):
    key = m.group('footnote_key')

    child = state.child_state(_dedent_definition(m.group('footnote_text')))
    block.parse(child)

    state.append_token({
        'type': 'footnote_definition',
        'children': child.tokens,
        'attrs': {'key': key},
    })
    return m.end()


def parse_footnote_reference(inline, m, state):
    key = m.group('footnote_key')
    if key in state.env.get(DEFINITIONS_KEY, ()):
        state.append_token({'type': 'footnote_ref', 'raw': key})
    else:
        state.append_token({'type': 'text', 'raw': m.group(0)})
    return m.end()


def _collect_definitions(md, state):
    keys = []
    stack = list(state.tokens)
    while stack:
        token = stack.pop()
        if token['type'] == 'footnote_definition':
            keys.append(token['attrs']['key'])
        stack.extend(token.get('children', ()))
    state.env[DEFINITIONS_KEY] = frozenset(keys)


def footnote_definitions(md):
    """Footnotes that stay where they are defined.

    Unlike mistune's own footnotes plugin, definitions are kept in the token
    tree at their position and references are not numbered here.
    """
    md.block.register('footnote_definition', REF_FOOTNOTE, parse_footnote_definition, before='ref_link')
    md.inline.register('footnote_reference', INLINE_FOOTNOTE, parse_footnote_reference, before='link')
    md.before_render_hooks.append(_collect_definitions)


def create_tokenizer():
    """Create a mistune parser that produces an AST instead of HTML."""
    return mistune.create_markdown(
        renderer='ast',
        plugins=['table', 'task_lists', 'strikethrough', frontmatter, footnote_definitions],
    )
