"""Generate article pages and the index page, and lay them out for construction."""

import html
import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from .construct import ConstructFile, ConstructionNode
from .exceptions import SlugCollisionError
from .model import Article, GenerationContext
from .structure import AssetFile
from .template import ARTICLE_TEMPLATE, INDEX_LIST_TEMPLATE, INDEX_TEMPLATE, HtmlTemplates

ARTICLES_DIR = 'articles'
INDEX_PAGE = 'index.html'

logger = logging.getLogger('Platemaker')


@dataclass(frozen=True)
class ArticlePage:
    article: Article
    html: str

    @property
    def path(self) -> str:
        return self.article.output_path

    def __repr__(self):
        return f"ArticlePage(path={self.path!r}, html={self.html[:30]!r}...)"


def _context_values(context: GenerationContext) -> Dict[str, bool]:
    return {'debug': context.debug, 'release': context.release}


def _article_values(article: Article) -> Dict[str, str]:
    return {
        'title': html.escape(article.metadata.title),
        'brief': html.escape(article.metadata.brief),
        'slug': article.slug,
        'group': article.group.flat_name,
        'date': article.date,
        'path': f"{ARTICLES_DIR}/{article.output_path}",
    }


def generate_article_html(templates: HtmlTemplates, article: Article,
                          context: GenerationContext) -> ArticlePage:
    logger.debug(f"Generating HTML for slug '{article.slug}'")

    values = _article_values(article)
    values['content'] = article.content
    values.update(article.metadata.widgets.render_to_placeholder_content())
    values.update(_context_values(context))

    return ArticlePage(article=article, html=templates.render(ARTICLE_TEMPLATE, values))


def generate_index_html(templates: HtmlTemplates, pages: Iterable[ArticlePage],
                        context: GenerationContext) -> str:
    """Render the index page listing ``pages`` newest first."""
    articles = sorted((page.article for page in pages), key=lambda article: article.identity.sort_key, reverse=True)
    logger.debug(f"Generating index page for {len(articles)} articles")

    items = []
    for article in articles:
        values = _article_values(article)
        values.update(_context_values(context))
        items.append(templates.render(INDEX_LIST_TEMPLATE, values))

    values = {'articles': ''.join(items)}
    values.update(_context_values(context))
    return templates.render(INDEX_TEMPLATE, values)


def check_slug_collisions(articles: Iterable[Article]) -> None:
    """Raise SlugCollisionError if two articles share an output path."""
    sources = defaultdict(list)
    for article in articles:
        sources[article.output_path].append(article.source_path or article.slug)

    for output_path, paths in sources.items():
        if len(paths) > 1:
            raise SlugCollisionError(f"{ARTICLES_DIR}/{output_path}", paths)


def asset_construct_files(asset_files: Iterable[AssetFile]) -> List[ConstructFile]:
    """Asset files placed relative to the articles directory."""
    files = []
    for asset in asset_files:
        with open(asset.path, 'rb') as f:
            content = f.read()
        files.append(ConstructFile(path=f"{asset.group.flat_name}/assets/{asset.relative_path}", content=content))
    return files


def get_webpage_construction(pages: Iterable[ArticlePage], index_html: Optional[str] = None,
                             root_files: Iterable[ConstructFile] = (),
                             article_files: Iterable[ConstructFile] = ()) -> ConstructionNode:
    """Lay generated pages and copied files out as a construction tree.

    ``root_files`` go to the destination root, ``article_files`` below the
    articles directory.
    """
    root = ConstructionNode('', files=list(root_files))
    if index_html is not None:
        root.files.append(ConstructFile(path=INDEX_PAGE, content=index_html))

    articles = root.child(ARTICLES_DIR)
    articles.files.extend(ConstructFile(path=page.path, content=page.html) for page in pages)
    articles.files.extend(article_files)

    return root
