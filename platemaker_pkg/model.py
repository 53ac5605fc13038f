from dataclasses import dataclass
import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .structure import ArticleIdentity
from .widgets import Widgets


class ArticleMetadata(BaseModel):
    """Decoded frontmatter. Unknown keys are kept."""
    model_config = ConfigDict(extra='allow')

    title: str
    brief: str = ''
    date: Optional[str] = None
    widgets: Widgets = Field(default_factory=Widgets)

    @field_validator('date', mode='before')
    @classmethod
    def date_to_string(cls, value):
        if isinstance(value, (datetime.date, datetime.datetime)):
            return value.isoformat()
        return value


@dataclass(frozen=True)
class Article:
    identity: ArticleIdentity
    metadata: ArticleMetadata
    content: str
    source_path: Optional[str] = None

    @property
    def slug(self) -> str:
        return self.identity.slug

    @property
    def group(self):
        return self.identity.group

    @property
    def date(self) -> str:
        return self.metadata.date or self.identity.date_string

    @property
    def output_path(self) -> str:
        """Path of the generated page relative to the articles directory."""
        return f"{self.group.flat_name}/{self.slug}.html"


@dataclass(frozen=True)
class GenerationContext:
    release: bool = False

    @property
    def debug(self) -> bool:
        return not self.release
