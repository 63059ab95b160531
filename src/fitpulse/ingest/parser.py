"""
CSV parser — runs one file through tokenize → classify → resolve → materialize.

Every call returns a :class:`ParsedFileResult`; bad files come back as
failures with a readable error instead of raising.  Only failing to read a
file from disk raises (``FileIOError``).
"""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from fitpulse.core.exceptions import FileIOError

from .aliases import HeaderAliasTable
from .classifier import classify_headers, describe_unrecognized
from .materializer import materialize
from .models import ParsedFileResult, RecordCategory
from .resolver import HeaderResolver
from .tokenizer import tokenize

NOT_ENOUGH_ROWS = "CSV file must contain at least a header row and one data row"


class CSVParser:
    """Parse vendor CSV exports into typed records.

    Example::

        parser = CSVParser(HeaderAliasTable(JsonFileAliasStore("~/.fitpulse-data/learned_aliases.json")))
        result = parser.parse_file("physiological_cycles.csv")
        if result.success:
            print(result.category, result.record_count)
    """

    def __init__(self, alias_table: HeaderAliasTable | None = None, resolver: HeaderResolver | None = None):
        """Pass either an alias table (a default resolver is built on it) or a resolver, not both."""
        if alias_table is not None and resolver is not None:
            raise ValueError("Pass alias_table or resolver, not both; the resolver carries its own alias table")
        if resolver is None:
            resolver = HeaderResolver(alias_table)
        self.resolver = resolver
        self.alias_table = resolver.alias_table

    def parse_text(self, text: str, source: str = "<text>") -> ParsedFileResult:
        """Parse CSV *text*.  Never raises for malformed content."""
        try:
            return self._parse(text, source)
        except Exception as e:
            logger.warning(f"Failed to parse {source}: {e}")
            return ParsedFileResult.failure(str(e) or "Failed to parse CSV file", source=source)

    def parse_file(self, path: str | Path) -> ParsedFileResult:
        """Read and parse a CSV file.

        Raises:
            FileIOError: the file could not be read or decoded.
        """
        path = Path(path).expanduser()
        try:
            text = path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            raise FileIOError(f"Cannot read {path}: {e}") from e
        return self.parse_text(text, source=path.name)

    def _parse(self, text: str, source: str) -> ParsedFileResult:
        rows = tokenize(text)
        if len(rows) < 2:
            return ParsedFileResult.failure(NOT_ENOUGH_ROWS, source=source)

        headers = rows[0]
        logger.debug(f"{source}: headers {headers}")

        category = classify_headers(headers)
        logger.debug(f"{source}: detected {category}")
        if category == RecordCategory.UNKNOWN:
            return ParsedFileResult.failure(describe_unrecognized(headers), source=source)

        mapping = self.resolver.resolve(headers, category)
        data_rows = rows[1:]
        built = materialize(category, data_rows, headers, mapping)

        if built.skipped:
            logger.warning(f"{source}: skipped {built.skipped} of {len(data_rows)} {category} rows")

        return ParsedFileResult(
            success=True,
            category=category,
            records=tuple(built.records),
            rows_processed=len(data_rows),
            rows_skipped=built.skipped,
            source=source,
            mapping=mapping,
        )
