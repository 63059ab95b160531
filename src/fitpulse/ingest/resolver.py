"""
Header resolution: map each target field of a category to one actual column.

Matching runs in layers, per field:

1. known vendor column names (exact, case-insensitive) — always win;
2. exact alias match — confidence 1.0, stops the search;
3. substring containment either way —
   ``max(len(alias)/len(header), len(header)/len(alias)) * 0.9``;
4. fuzzy match — ``1 - levenshtein / max(len)``, only counted above 0.7.

The best-scoring header is accepted when its confidence exceeds the match
threshold (0.6).  Accepted matches are written back to the learned alias
tier so the next file with the same header resolves exactly.
"""

from __future__ import annotations

from loguru import logger

from .aliases import HeaderAliasTable, normalize_header
from .models import ColumnMapping, RecordCategory, target_fields

EXACT_CONFIDENCE = 1.0
SUBSTRING_WEIGHT = 0.9
DEFAULT_MATCH_THRESHOLD = 0.6
DEFAULT_FUZZY_THRESHOLD = 0.7


def levenshtein(a: str, b: str) -> int:
    """Edit distance with unit-cost insertion, deletion and substitution."""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i] + [0] * len(b)
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current[j] = min(
                previous[j] + 1,  # deletion
                current[j - 1] + 1,  # insertion
                previous[j - 1] + cost,  # substitution
            )
        previous = current
    return previous[-1]


def similarity(a: str, b: str) -> float:
    """Normalised edit-distance similarity in [0, 1]."""
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1.0 - levenshtein(a, b) / longest


def match_confidence(header: str, alias: str, fuzzy_threshold: float = DEFAULT_FUZZY_THRESHOLD) -> float:
    """Score how well *header* matches *alias*; 0.0 means no match at all."""
    h = normalize_header(header)
    a = normalize_header(alias)
    if not h or not a:
        return 0.0

    if h == a:
        return EXACT_CONFIDENCE

    if a in h or h in a:
        return max(len(a) / len(h), len(h) / len(a)) * SUBSTRING_WEIGHT

    score = similarity(h, a)
    if score > fuzzy_threshold:
        return score
    return 0.0


class HeaderResolver:
    """Resolve header rows against a :class:`HeaderAliasTable`."""

    def __init__(
        self,
        alias_table: HeaderAliasTable | None = None,
        match_threshold: float = DEFAULT_MATCH_THRESHOLD,
        fuzzy_threshold: float = DEFAULT_FUZZY_THRESHOLD,
        learn: bool = True,
    ):
        self.alias_table = alias_table if alias_table is not None else HeaderAliasTable()
        self.match_threshold = match_threshold
        self.fuzzy_threshold = fuzzy_threshold
        self.learn = learn

    def resolve_field(self, headers: list[str], category: RecordCategory, field_name: str) -> tuple[str | None, float]:
        """Return ``(header, confidence)`` for one field, or ``(None, best)`` when unresolved."""
        normalized = [normalize_header(h) for h in headers]
        # Vendor names are listed most-specific first ("Sleep onset" before "Cycle start time").
        for column in self.alias_table.vendor_columns(category, field_name):
            if column in normalized:
                return headers[normalized.index(column)], EXACT_CONFIDENCE

        aliases = self.alias_table.aliases_for(category, field_name)
        best_header: str | None = None
        best = 0.0

        for header in headers:
            h = normalize_header(header)
            if not h:
                continue
            for alias in aliases:
                if h == alias:
                    return header, EXACT_CONFIDENCE
                score = match_confidence(h, alias, self.fuzzy_threshold)
                if score > best:
                    best = score
                    best_header = header

        if best_header is not None and best > self.match_threshold:
            return best_header, best
        return None, best

    def resolve(self, headers: list[str], category: RecordCategory) -> ColumnMapping:
        """Build a :class:`ColumnMapping` for every target field of *category*.

        Fields that stay below the match threshold are left out of the
        mapping; the materializer fills them with defaults.
        """
        mapping = ColumnMapping()
        for field_name in target_fields(category):
            header, confidence = self.resolve_field(headers, category, field_name)
            if header is None:
                logger.debug(f"No column for {category}.{field_name} (best confidence {confidence:.2f})")
                continue
            mapping.columns[field_name] = header
            mapping.confidence[field_name] = confidence

        if self.learn:
            self.alias_table.learn_many(category, mapping.columns)
        return mapping
