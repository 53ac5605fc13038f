import logging
import tomllib

from pydantic import ValidationError

from ..exceptions import InvalidTomlError, NoFrontmatterError
from ..model import Article, ArticleMetadata
from ..structure import ArticleFile
from .pipeline import MarkdownParser


def decode_metadata(frontmatter: str) -> ArticleMetadata:
    """Decode TOML frontmatter into ArticleMetadata."""
    try:
        data = tomllib.loads(frontmatter)
    except tomllib.TOMLDecodeError as e:
        raise InvalidTomlError(str(e))

    try:
        return ArticleMetadata.model_validate(data)
    except ValidationError as e:
        raise InvalidTomlError(str(e))


def make_article_from_markdown(article_file: ArticleFile, raw_text: str, parser: MarkdownParser) -> Article:
    try:
        parsed = parser.parse(raw_text)
    except NoFrontmatterError:
        raise NoFrontmatterError(article_file.path)

    try:
        metadata = decode_metadata(parsed.frontmatter)
    except InvalidTomlError as e:
        raise InvalidTomlError(e.message, article_file.path)

    return Article(
        identity=article_file.identity,
        metadata=metadata,
        content=parsed.html,
        source_path=article_file.path,
    )


def parse_markdown_file(article_file: ArticleFile, parser: MarkdownParser,
                        logger: logging.Logger = None) -> Article:
    """Read and parse one article file."""
    logger = logger or parser.logger
    logger.debug(f"Parsing {article_file.path}")
    return make_article_from_markdown(article_file, article_file.read(), parser)
