"""Shared setup logic for CLI commands."""

from __future__ import annotations

from pathlib import Path

import click

from fitpulse.core.config import Config
from fitpulse.core.exceptions import ConfigurationError

FITPULSE_DIR = Path.home() / ".fitpulse"
CONFIG_PATH = FITPULSE_DIR / "config.yaml"


def load_config(config_file: str | None = None) -> Config:
    """Load config from *config_file*, falling back to ~/.fitpulse/config.yaml."""
    path = config_file or str(CONFIG_PATH)
    try:
        return Config(config_file=path)
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e


def create_alias_table(config: Config):
    """HeaderAliasTable backed by the configured JSON alias store."""
    from fitpulse.ingest.aliases import HeaderAliasTable, JsonFileAliasStore

    settings = _validated(config)
    store_path = settings.ingest.alias_store_path or Path(config.get_data_dir()) / "learned_aliases.json"
    return HeaderAliasTable(JsonFileAliasStore(store_path))


def create_parser(config: Config):
    """CSVParser wired to the configured alias store and thresholds."""
    from fitpulse.ingest.parser import CSVParser
    from fitpulse.ingest.resolver import HeaderResolver

    settings = _validated(config)
    resolver = HeaderResolver(
        create_alias_table(config),
        match_threshold=settings.ingest.match_threshold,
        fuzzy_threshold=settings.ingest.fuzzy_threshold,
        learn=settings.ingest.learn,
    )
    return CSVParser(resolver=resolver)


def _validated(config: Config):
    try:
        return config.validated()
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e
