import os
import time
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional, Tuple
from concurrent.futures import ProcessPoolExecutor, as_completed

from .construct import ConstructionNode, collect_directory_files, plan, read_construct_file
from .exceptions import ParseError, WebsiteGenerationError
from .model import Article, GenerationContext
from .parse import EmojiDataset, MarkdownParser, parse_markdown_file
from .settings import Configuration
from .structure import ArticleFile, AssetFile, ContentDirectory, classify_path
from .template import TEMPLATE_FILES, HtmlTemplates, is_template_file
from .watch import Watcher
from .website import (
    asset_construct_files,
    check_slug_collisions,
    generate_article_html,
    generate_index_html,
    get_webpage_construction,
)

# Below this many articles, parsing in worker processes costs more than it saves.
MULTIPROCESSING_THRESHOLD = 12

_worker_parser = None


def initializer(emoji_dataset_path):
    """Create the MarkdownParser used by each worker process."""
    global _worker_parser
    dataset = EmojiDataset.from_file(emoji_dataset_path) if emoji_dataset_path else None
    _worker_parser = MarkdownParser(emoji_dataset=dataset)


def parse_file(article_file):
    """Parse one article in a worker; parse errors are returned, not raised."""
    try:
        return parse_markdown_file(article_file, _worker_parser), None
    except ParseError as e:
        return None, str(e)


def setup_logging(log_dir: str = None, verbose: bool = False) -> logging.Logger:
    """Set up logging configuration."""
    logger = logging.getLogger('Platemaker')
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    if not logger.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        console_handler.setFormatter(logging.Formatter('%(message)s'))
        logger.addHandler(console_handler)

        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
            log_filename = datetime.now().strftime('platemaker_%Y-%m-%d_%H-%M-%S.log')
            file_handler = logging.FileHandler(os.path.join(log_dir, log_filename), encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
            logger.addHandler(file_handler)
            # The file gets everything; the console level stays as configured
            logger.setLevel(logging.DEBUG)

    return logger


@dataclass
class BuildReport:
    articles_built: int = 0
    articles_skipped: List[Tuple[str, str]] = field(default_factory=list)
    files_written: int = 0


class Platemaker:
    def __init__(self, config: Configuration, context: GenerationContext = None,
                 logger: logging.Logger = None, emoji_dataset_path: str = None):
        self.config = config
        self.context = context or GenerationContext()
        self.logger = logger or logging.getLogger('Platemaker')
        self.emoji_dataset_path = emoji_dataset_path

        dataset = EmojiDataset.from_file(emoji_dataset_path) if emoji_dataset_path else None
        self.parser = MarkdownParser(logger=self.logger.getChild('Markdown'), emoji_dataset=dataset)

    def load_templates(self) -> HtmlTemplates:
        self.logger.debug(f"Loading HTML templates from {self.config.templates_dir}")
        return HtmlTemplates(self.config.templates_dir)

    def parse_articles(self, article_files: List[ArticleFile], report: BuildReport) -> List[Article]:
        """Parse articles, skipping the ones that fail to parse."""
        if len(article_files) >= MULTIPROCESSING_THRESHOLD:
            self.logger.info(f"Using multiprocessing for {len(article_files)} files with {os.cpu_count()} workers")
            articles = self._parse_with_multiprocessing(article_files, report)
        else:
            self.logger.info(f"Using single-threaded processing for {len(article_files)} files")
            articles = self._parse_single_threaded(article_files, report)

        articles.sort(key=lambda article: article.identity.sort_key)
        return articles

    def _skip(self, report: BuildReport, path: str, reason: str) -> None:
        self.logger.warning(f"Skipping {path}: {reason}")
        report.articles_skipped.append((path, reason))

    def _parse_single_threaded(self, article_files, report):
        articles = []
        for article_file in article_files:
            try:
                articles.append(parse_markdown_file(article_file, self.parser, self.logger))
            except ParseError as e:
                self._skip(report, article_file.path, str(e))
        return articles

    def _parse_with_multiprocessing(self, article_files, report):
        articles = []
        with ProcessPoolExecutor(
            max_workers=os.cpu_count(),
            initializer=initializer,
            initargs=(self.emoji_dataset_path,)
        ) as executor:
            futures = {executor.submit(parse_file, article_file): article_file for article_file in article_files}
            for future in as_completed(futures):
                article, error = future.result()
                if error is not None:
                    self._skip(report, futures[future].path, error)
                else:
                    articles.append(article)
        return articles

    def generate_pages(self, templates: HtmlTemplates, articles: List[Article]):
        check_slug_collisions(articles)
        try:
            pages = [generate_article_html(templates, article, self.context) for article in articles]
        except WebsiteGenerationError as e:
            self.logger.error(f"Error generating article pages: {e}")
            raise
        self.logger.info(f"Generated {len(pages)} article pages")
        return pages

    def template_directory_files(self, paths: Optional[Iterable[str]] = None):
        """Files of the template directory that are copied as they are."""
        if paths is None:
            return collect_directory_files(self.config.templates_dir, excludes=TEMPLATE_FILES)

        files = []
        for path in paths:
            relative = os.path.relpath(os.path.abspath(path), self.config.templates_dir)
            if relative.startswith(os.pardir) or is_template_file(path) or not os.path.isfile(path):
                continue
            files.append(read_construct_file(path, relative))
        return files

    def write(self, tree: ConstructionNode) -> int:
        construction = plan(tree, self.config.destination_dir)
        construction.execute(self.logger.getChild('Construct'))
        return len(construction.files)

    def full_build(self) -> BuildReport:
        """Build every article, the index page, template files and assets."""
        start_time = time.time()
        self.logger.info(f"Building all articles in {self.config.content_dir}")
        report = BuildReport()

        content = ContentDirectory.scan(self.config.content_dir)
        self.logger.info(f"Discovered {len(content.article_files)} articles in {len(content.groups)} groups")

        templates = self.load_templates()
        articles = self.parse_articles(content.article_files, report)
        pages = self.generate_pages(templates, articles)

        self.logger.info("Building index page")
        try:
            index_html = generate_index_html(templates, pages, self.context)
        except WebsiteGenerationError as e:
            self.logger.error(f"Error generating index page: {e}")
            raise

        tree = get_webpage_construction(
            pages,
            index_html=index_html,
            root_files=self.template_directory_files(),
            article_files=asset_construct_files(content.asset_files),
        )
        report.articles_built = len(pages)
        report.files_written = self.write(tree)

        self.logger.info(f"Site build completed in {time.time() - start_time:.6f} seconds.")
        self.logger.info(f"Total articles generated: {report.articles_built}")
        if report.articles_skipped:
            self.logger.info(f"Total articles skipped: {len(report.articles_skipped)}")
        return report

    def build_files(self, paths: Iterable[str]) -> BuildReport:
        """Rebuild the given content files. The index page is left as it is."""
        report = BuildReport()
        article_files = []
        asset_files = []
        for path in paths:
            if not os.path.isfile(path):
                continue
            classified = classify_path(self.config.content_dir, path)
            if isinstance(classified, ArticleFile):
                article_files.append(classified)
            elif isinstance(classified, AssetFile):
                asset_files.append(classified)

        if not article_files and not asset_files:
            return report

        pages = []
        if article_files:
            self.logger.info(f"Rebuilding {len(article_files)} articles")
            articles = self._parse_single_threaded(article_files, report)
            pages = self.generate_pages(self.load_templates(), articles)

        if asset_files:
            self.logger.info(f"Updating {len(asset_files)} asset files")

        tree = get_webpage_construction(pages, article_files=asset_construct_files(asset_files))
        report.articles_built = len(pages)
        report.files_written = self.write(tree)
        return report

    def update_template_files(self, paths: Iterable[str]) -> BuildReport:
        """Copy changed template directory files; a page template change rebuilds everything."""
        paths = list(paths)
        if any(is_template_file(path) for path in paths):
            self.logger.warning("Page template file is updated! Rebuilding all articles.")
            return self.full_build()

        report = BuildReport()
        files = self.template_directory_files(paths)
        if files:
            self.logger.info(f"Updating {len(files)} template directory files")
            report.files_written = self.write(ConstructionNode('', files=files))
        return report

    def watch(self, build_first: bool = False, debounce: float = 0.5) -> None:
        Watcher(self, debounce=debounce).run(build_first=build_first)
