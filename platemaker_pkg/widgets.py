"""
Article widgets configured from the ``[widgets]`` table of the frontmatter.

Each widget renders to one template placeholder; ``widget_styles`` carries the
CSS of all widgets.
"""

import html
from enum import Enum
from typing import Dict, List, Tuple

from pydantic import BaseModel, Field


class AiUsage(str, Enum):
    UNUSED = 'Unused'
    REVIEW = 'Review'
    NON_TEXT = 'NonText'
    RESEARCH_SUPPORT = 'ResearchSupport'
    RESEARCH = 'Research'
    ARTICLE_OUTLINING = 'ArticleOutlining'
    MAIN_TEXT = 'MainText'

    @property
    def description(self) -> Tuple[str, str]:
        return _AI_DESCRIPTIONS[self]

    @property
    def heavy_use(self) -> bool:
        return self in (AiUsage.RESEARCH, AiUsage.ARTICLE_OUTLINING, AiUsage.MAIN_TEXT)

    def build(self) -> str:
        if self is AiUsage.UNUSED:
            return ''

        heavy_class = 'aiusage-heavy' if self.heavy_use else ''
        brief, description = self.description
        return (
            f'<span class="aiusage {heavy_class}">'
            f'<span class="brief">{brief}</span>'
            f'<span class="description">{description}</span>'
            f'</span>'
        )

    def style(self) -> str:
        return AI_USAGE_STYLE


_AI_DESCRIPTIONS = {
    AiUsage.UNUSED: ("AI not used", "この記事では AI は使っていません"),
    AiUsage.REVIEW: ("AI used for review", "この記事は推敲に AI を使っています"),
    AiUsage.NON_TEXT: ("AI generated non-text contents", "テキスト以外のコンテンツで AI を使っています"),
    AiUsage.RESEARCH_SUPPORT: ("AI supported researching for this", "この記事を書くにあたって、AI と協力して調査しました"),
    AiUsage.RESEARCH: ("AI researched for this", "この記事を書くにあたって、AI に調査してもらいました"),
    AiUsage.ARTICLE_OUTLINING: ("AI generated the outline", "記事の構成作成に AI を使っています"),
    AiUsage.MAIN_TEXT: ("AI generated the main text", "本文作成に AI を使っています"),
}

AI_USAGE_STYLE = """
.aiusage {
    border: 1px solid var(--primary);
    color: var(--primary);
    padding: 0px 6px;
    width: fit-content;

    &.aiusage-heavy {
        background-color: var(--primary);
        color: white;
    }

    .brief {
        font-style: italic;
    }
}
"""


class ArticleType(str, Enum):
    ACTIVITY = 'Activity'
    RESEARCH = 'Research'

    @property
    def description(self) -> str:
        return '活動記録' if self is ArticleType.ACTIVITY else '学習記録'

    @property
    def class_name(self) -> str:
        return 'article-activity' if self is ArticleType.ACTIVITY else 'article-research'

    def build(self) -> str:
        return f'<h2 class="article-type {self.class_name}">{self.description}</h2>'

    def style(self) -> str:
        return ''


class Source(BaseModel):
    name: str
    url: str

    def to_html(self) -> str:
        name = html.escape(self.name)
        url = html.escape(self.url)
        return (
            f'<li class="source">'
            f'<h4 class="name">{name}</h4>'
            f'<a href="{url}"><span>{url}</span></a>'
            f'</li>'
        )


SOURCES_TITLE = ("ARTICLE SOURCES", "この記事の参考文献")

SOURCES_STYLE = """
.source {
    color: var(--primary);
}

.name {
    font-size: 1.25rem;
    font-weight: bold;
}
"""


def build_sources(sources: List[Source]) -> str:
    if not sources:
        return ''

    first_title, second_title = SOURCES_TITLE
    items = ''.join(source.to_html() for source in sources)
    return (
        f'<section>'
        f'<h3><span>{first_title}</span><span>{second_title}</span></h3>'
        f'<div class="content"><ul>{items}</ul></div>'
        f'</section>'
    )


class Widgets(BaseModel):
    ai: AiUsage = AiUsage.UNUSED
    article_type: ArticleType = ArticleType.ACTIVITY
    sources: List[Source] = Field(default_factory=list)

    def render_to_placeholder_content(self) -> Dict[str, str]:
        return {
            'ai': self.ai.build(),
            'type': self.article_type.build(),
            'sources': build_sources(self.sources),
            'widget_styles': self.concatenate_styles(),
        }

    def concatenate_styles(self) -> str:
        return self.ai.style() + self.article_type.style() + SOURCES_STYLE
