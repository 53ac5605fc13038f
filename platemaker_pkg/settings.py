#!/usr/bin/env python3
"""
Settings loader for Platemaker.
Supports configuration from platemaker.toml, platemaker.yml, platemaker.yaml
or platemaker.json files.
"""

import os
import json
import tomllib
from dataclasses import dataclass
from typing import Dict, Any, Optional

import yaml


@dataclass(frozen=True)
class Configuration:
    """Validated, absolute directories a build works on."""
    templates_dir: str
    content_dir: str
    destination_dir: str

    @classmethod
    def from_paths(cls, templates: str, content: str, destination: str) -> 'Configuration':
        """
        Resolve and validate build directories.

        The templates and content directories must exist; the destination is
        created when missing.

        Raises:
            FileNotFoundError: If the templates or content directory is missing
        """
        templates_dir = os.path.abspath(os.path.expanduser(templates))
        content_dir = os.path.abspath(os.path.expanduser(content))
        destination_dir = os.path.abspath(os.path.expanduser(destination))

        if not os.path.isdir(templates_dir):
            raise FileNotFoundError(f"Templates directory '{templates_dir}' does not exist.")
        if not os.path.isdir(content_dir):
            raise FileNotFoundError(f"Content directory '{content_dir}' does not exist.")

        os.makedirs(destination_dir, exist_ok=True)
        return cls(templates_dir, content_dir, destination_dir)


class PlatemakerSettings:
    """Load and manage Platemaker configuration settings."""

    # Default configuration
    DEFAULT_SETTINGS = {
        'templates': 'templates',
        'content': 'articles',
        'destination': 'dist',
        'release': False,
        'log_dir': None,
        'emoji_dataset': None,
        'debounce': 0.5,
    }

    # Config file names to look for (in order of preference)
    CONFIG_FILES = ['platemaker.toml', 'platemaker.yml', 'platemaker.yaml', 'platemaker.json']

    def __init__(self, config_dir: str = None, config_file: str = None):
        """
        Initialize settings loader.

        Args:
            config_dir: Directory to look for config files. Defaults to current directory.
            config_file: Explicit configuration file; disables the lookup.
        """
        self.config_dir = config_dir or os.getcwd()
        self.settings = self.DEFAULT_SETTINGS.copy()
        self.config_file_path = config_file

    def load_settings(self) -> Dict[str, Any]:
        """
        Load settings from the configuration file if there is one.

        Relative directories in a configuration file are resolved against the
        directory containing that file.

        Returns:
            Dictionary of configuration settings
        """
        config_file = self.config_file_path or self._find_config_file()

        if config_file:
            if not os.path.exists(config_file):
                raise FileNotFoundError(f"Configuration file not found: {config_file}")

            self.config_file_path = config_file
            loaded_settings = self._load_config_file(config_file)
            if loaded_settings:
                base_dir = os.path.dirname(os.path.abspath(config_file))
                for key in ('templates', 'content', 'destination', 'log_dir', 'emoji_dataset'):
                    value = loaded_settings.get(key)
                    if isinstance(value, str) and not os.path.isabs(os.path.expanduser(value)):
                        loaded_settings[key] = os.path.join(base_dir, value)
                self.settings.update(loaded_settings)

        return self.settings.copy()

    def _find_config_file(self) -> Optional[str]:
        """
        Find the first available configuration file.

        Returns:
            Path to config file or None if not found
        """
        for filename in self.CONFIG_FILES:
            config_path = os.path.join(self.config_dir, filename)
            if os.path.exists(config_path):
                return config_path
        return None

    def _load_config_file(self, config_path: str) -> Dict[str, Any]:
        """
        Load configuration from a file.

        Args:
            config_path: Path to the configuration file

        Returns:
            Dictionary of configuration settings
        """
        file_ext = os.path.splitext(config_path)[1].lower()

        try:
            if file_ext == '.toml':
                with open(config_path, 'rb') as f:
                    return tomllib.load(f)

            with open(config_path, 'r', encoding='utf-8') as f:
                if file_ext in ['.yml', '.yaml']:
                    return yaml.safe_load(f) or {}
                elif file_ext == '.json':
                    return json.load(f) or {}
                else:
                    raise ValueError(f"Unsupported config file format: {file_ext}")
        except PermissionError:
            raise PermissionError(f"Permission denied reading configuration file: {config_path}")
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML in configuration file {config_path}: {e}")
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file {config_path}: {e}")
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in configuration file {config_path}: {e}")

    def create_sample_config(self, file_format: str = 'toml') -> str:
        """
        Create a sample configuration file.

        Args:
            file_format: Format for config file ('toml', 'yml', 'yaml' or 'json')

        Returns:
            Path to created sample config file
        """
        filename = f'platemaker.{file_format}'
        config_path = os.path.join(self.config_dir, filename)

        try:
            with open(config_path, 'w', encoding='utf-8') as f:
                if file_format == 'toml':
                    f.write("# Platemaker configuration\n\n")
                    f.write("# Build directories\n")
                    f.write('templates = "templates"\n')
                    f.write('content = "articles"\n')
                    f.write('destination = "dist"\n\n')
                    f.write("# Use the ${if-release} branches of templates\n")
                    f.write("release = false\n\n")
                    f.write("# Seconds of quiet before watch mode rebuilds\n")
                    f.write("debounce = 0.5\n")
                elif file_format in ['yml', 'yaml']:
                    f.write("# Platemaker configuration\n\n")
                    f.write("# Build directories\n")
                    f.write("templates: templates\n")
                    f.write("content: articles\n")
                    f.write("destination: dist\n\n")
                    f.write("# Use the ${if-release} branches of templates\n")
                    f.write("release: false\n\n")
                    f.write("# Seconds of quiet before watch mode rebuilds\n")
                    f.write("debounce: 0.5\n")
                elif file_format == 'json':
                    sample_config = {
                        key: value for key, value in self.DEFAULT_SETTINGS.items() if value is not None
                    }
                    json.dump(sample_config, f, indent=2)
                else:
                    raise ValueError(f"Unsupported config file format: {file_format}")
        except PermissionError:
            raise PermissionError(f"Permission denied creating configuration file: {config_path}")

        return config_path

    def merge_with_args(self, args_dict: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge configuration settings with command line arguments.
        Command line arguments take precedence over config file settings.

        Args:
            args_dict: Dictionary of command line arguments

        Returns:
            Merged settings dictionary
        """
        merged = self.settings.copy()

        for key, value in args_dict.items():
            if value is not None and key in self.DEFAULT_SETTINGS:
                # Flags only override when they were actually given
                if isinstance(value, bool) and not value:
                    continue
                merged[key] = value

        return merged

    def configuration(self, settings: Dict[str, Any] = None) -> Configuration:
        settings = settings or self.settings
        return Configuration.from_paths(settings['templates'], settings['content'], settings['destination'])
