#!/usr/bin/env python3
"""
Command-line interface for Platemaker - static site generator.
"""

import os
import sys
import argparse
import datetime
from importlib import resources

from . import __version__
from .core import Platemaker, setup_logging
from .exceptions import PlatemakerError
from .model import GenerationContext
from .settings import PlatemakerSettings

SAMPLE_ARTICLE = """+++
title = "Hello, Platemaker"
brief = "The first article of this site."

[widgets]
ai = "Unused"
article_type = "Activity"
+++

# Hello :wave:

This article lives in `{group_dir}/hello.md`.
Every article starts with a TOML frontmatter between `+++` lines.

```python
print("Hello, Platemaker!")
```

Footnotes are collected at the end of the page[^1].

[^1]: Like this one.
"""


def create_starter_structure() -> None:
    """Create starter templates and a sample article in the current directory."""
    current_dir = os.getcwd()
    today = datetime.date.today()
    group_dir = f"{today.year:04d}/{today.month:02d}"

    for directory in ('templates', os.path.join('articles', *group_dir.split('/'))):
        dir_path = os.path.join(current_dir, directory)
        if os.path.exists(dir_path):
            print(f"Directory already exists: {directory}")
        else:
            os.makedirs(dir_path, exist_ok=True)
            print(f"Created directory: {directory}")

    template_source = resources.files('platemaker_pkg').joinpath('templates')
    for template in template_source.iterdir():
        if not template.name.endswith(('.html', '.css')):
            continue
        dest_path = os.path.join(current_dir, 'templates', template.name)
        if os.path.exists(dest_path):
            print(f"Template already exists: templates/{template.name}")
        else:
            with open(dest_path, 'wb') as f:
                f.write(template.read_bytes())
            print(f"Created template: templates/{template.name}")

    article_path = os.path.join(current_dir, 'articles', *group_dir.split('/'), 'hello.md')
    if os.path.exists(article_path):
        print(f"Sample article already exists: articles/{group_dir}/hello.md")
    else:
        with open(article_path, 'w', encoding='utf-8') as f:
            f.write(SAMPLE_ARTICLE.format(group_dir=group_dir))
        print(f"Created sample article: articles/{group_dir}/hello.md")

    print("\nNext steps:")
    print("1. Customize templates in the 'templates/' directory")
    print("2. Add articles as 'articles/YYYY/MM/slug.md'")
    print("3. Run 'platemaker build' or 'platemaker watch'")


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument('--config', type=str,
                        help='Configuration file (default: platemaker.toml/.yml/.yaml/.json in the current directory)')
    common.add_argument('--templates', type=str,
                        help='Templates directory')
    common.add_argument('--content', type=str,
                        help='Content directory containing YYYY/MM/ article folders')
    common.add_argument('--destination', type=str,
                        help='Output directory for the generated site')
    common.add_argument('--release', action='store_true',
                        help='Render the ${if-release} sections of templates instead of ${if-debug}')
    common.add_argument('--log-dir', type=str, dest='log_dir',
                        help='Directory for build log files')
    common.add_argument('--emoji-dataset', type=str, dest='emoji_dataset',
                        help='YAML file mapping emoji shortcodes to emoji')
    common.add_argument('--verbose', action='store_true',
                        help='Show debug messages')

    parser = argparse.ArgumentParser(prog='platemaker', description='Platemaker - Static Site Generator')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    commands = parser.add_subparsers(dest='command', required=True)

    commands.add_parser('build', parents=[common], help='Build the whole site')

    watch = commands.add_parser('watch', parents=[common], help='Rebuild changed files until interrupted')
    watch.add_argument('--build-first', action='store_true', dest='build_first',
                       help='Run a full build before watching')
    watch.add_argument('--debounce', type=float,
                       help='Seconds without changes before a rebuild starts')

    init = commands.add_parser('init', help='Create a sample configuration and starter structure')
    init.add_argument('--format', type=str, choices=['toml', 'yml', 'yaml', 'json'], default='toml',
                      help='Format of the configuration file')

    return parser


def main(argv=None) -> None:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    try:
        if args.command == 'init':
            settings_loader = PlatemakerSettings()
            config_path = settings_loader.create_sample_config(args.format)
            print(f"Created sample configuration file: {config_path}")

            print("\nCreating starter project structure...")
            create_starter_structure()
            print("\nYour new Platemaker site is ready!")
            return

        settings_loader = PlatemakerSettings(config_file=args.config)
        settings_loader.load_settings()

        # Command line arguments take precedence
        args_dict = {k: v for k, v in vars(args).items() if v is not None}
        final_settings = settings_loader.merge_with_args(args_dict)

        logger = setup_logging(final_settings['log_dir'], verbose=args.verbose)
        generator = Platemaker(
            settings_loader.configuration(final_settings),
            context=GenerationContext(release=bool(final_settings['release'])),
            logger=logger,
            emoji_dataset_path=final_settings['emoji_dataset'],
        )

        if args.command == 'watch':
            generator.watch(build_first=args.build_first, debounce=float(final_settings['debounce']))
        else:
            generator.full_build()

    except (PlatemakerError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
