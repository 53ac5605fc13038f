"""Tests for the command-line interface."""

import pytest
import os
import datetime
from unittest.mock import patch

import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from platemaker_pkg.cli import build_parser, main


class TestParser:
    """Test cases for argument parsing."""

    def test_build_options(self):
        """Test that build accepts the shared options."""
        args = build_parser().parse_args(['build', '--release', '--destination', 'out', '--log-dir', 'logs'])

        assert args.command == 'build'
        assert args.release is True
        assert args.destination == 'out'
        assert args.log_dir == 'logs'

    def test_watch_options(self):
        """Test the options only watch mode has."""
        args = build_parser().parse_args(['watch', '--build-first', '--debounce', '1.5'])

        assert args.build_first is True
        assert args.debounce == 1.5

    def test_command_required(self):
        """Test that a command must be given."""
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestMain:
    """Test cases for main."""

    def test_init_then_build(self, temp_dir, monkeypatch, capsys):
        """Test that the starter project builds into a site."""
        monkeypatch.chdir(temp_dir)
        today = datetime.date.today()
        group = os.path.join('articles', f'{today.year:04d}', f'{today.month:02d}')

        main(['init'])

        assert os.path.isfile(os.path.join(temp_dir, 'platemaker.toml'))
        assert os.path.isfile(os.path.join(temp_dir, 'templates', '_article.html'))
        assert os.path.isfile(os.path.join(temp_dir, group, 'hello.md'))
        assert 'Created sample configuration file' in capsys.readouterr().out

        main(['build'])

        assert os.path.isfile(os.path.join(temp_dir, 'dist', 'index.html'))
        assert os.path.isfile(os.path.join(temp_dir, 'dist', 'style.css'))
        page = os.path.join(temp_dir, 'dist', 'articles', f'{today.year:04d}{today.month:02d}', 'hello.html')
        with open(page, encoding='utf-8') as f:
            html = f.read()
        assert 'Hello, Platemaker' in html
        assert 'footnote-def' in html

    def test_init_twice_keeps_files(self, temp_dir, monkeypatch, capsys):
        """Test that init does not overwrite existing starter files."""
        monkeypatch.chdir(temp_dir)
        main(['init'])
        capsys.readouterr()

        main(['init'])

        assert 'Template already exists' in capsys.readouterr().out

    def test_missing_content_directory(self, temp_dir, templates_dir, monkeypatch, capsys):
        """Test that a configuration error exits with status 1."""
        monkeypatch.chdir(temp_dir)

        with pytest.raises(SystemExit) as excinfo:
            main(['build', '--content', 'missing'])

        assert excinfo.value.code == 1
        assert 'Error:' in capsys.readouterr().err

    def test_watch_uses_settings(self, temp_dir, templates_dir, content_dir, monkeypatch):
        """Test that watch mode gets the debounce time and build_first flag."""
        monkeypatch.chdir(temp_dir)

        with patch('platemaker_pkg.cli.Platemaker') as mock_platemaker, \
                patch('platemaker_pkg.cli.setup_logging'):
            main(['watch', '--build-first', '--debounce', '2'])

        mock_platemaker.return_value.watch.assert_called_once_with(build_first=True, debounce=2.0)
