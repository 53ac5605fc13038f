"""
HTML templates.

Templates are plain HTML with ``${name}`` placeholders and the conditional
markers ``${if-debug}``/``${end-if-debug}`` and ``${if-release}``/``${end-if-release}``.
They are rendered with Jinja2 using ``${`` delimiters, so the usual Jinja2
statements are also available as ``${% ... %}``.
"""

import os
import re
from typing import Any, Dict

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateNotFound,
    TemplateSyntaxError,
    meta,
)
from jinja2.ext import Extension

from .exceptions import InvalidPlaceholderError, WebsiteGenerationError

ARTICLE_TEMPLATE = '_article.html'
INDEX_TEMPLATE = '_index.html'
INDEX_LIST_TEMPLATE = '_index-list.html'

TEMPLATE_FILES = (ARTICLE_TEMPLATE, INDEX_TEMPLATE, INDEX_LIST_TEMPLATE)


def is_template_file(path: str) -> bool:
    return os.path.basename(path) in TEMPLATE_FILES


class ConditionalMarkers(Extension):
    """Rewrite ``${if-debug}`` style markers into Jinja2 if blocks."""

    MARKERS = {
        'if-debug': '${% if debug %}',
        'end-if-debug': '${% endif %}',
        'if-release': '${% if release %}',
        'end-if-release': '${% endif %}',
    }
    PATTERN = re.compile(r'\$\{\s*(if-debug|end-if-debug|if-release|end-if-release)\s*\}')

    def preprocess(self, source, name, filename=None):
        return self.PATTERN.sub(lambda match: self.MARKERS[match.group(1)], source)


def create_environment(templates_dir: str) -> Environment:
    return Environment(
        loader=FileSystemLoader(templates_dir),
        variable_start_string='${',
        variable_end_string='}',
        block_start_string='${%',
        block_end_string='%}',
        comment_start_string='${#',
        comment_end_string='#}',
        keep_trailing_newline=True,
        autoescape=False,
        undefined=StrictUndefined,
        extensions=[ConditionalMarkers],
    )


class HtmlTemplates:
    """The page templates of a template directory."""

    def __init__(self, templates_dir: str):
        self.templates_dir = templates_dir
        self.env = create_environment(templates_dir)

    def placeholders(self, name: str) -> set:
        """Names a template expects to be supplied."""
        try:
            source, _, _ = self.env.loader.get_source(self.env, name)
            return meta.find_undeclared_variables(self.env.parse(source, name))
        except TemplateNotFound:
            raise WebsiteGenerationError(f"Template '{name}' not found in {self.templates_dir}")
        except TemplateSyntaxError as e:
            raise WebsiteGenerationError(f"Template syntax error in {name} at line {e.lineno}: {e.message}")

    def render(self, name: str, values: Dict[str, Any]) -> str:
        missing = sorted(self.placeholders(name) - set(values))
        if missing:
            raise InvalidPlaceholderError(missing, name)

        return self.env.get_template(name).render(values)
