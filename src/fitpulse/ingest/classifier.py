"""Header-driven detection of which record schema a CSV file holds."""

from __future__ import annotations

from .models import RecordCategory

# Checked in order; first hit wins.  Keyword sets overlap ("calories" is both
# a workout and a daily signal) so the rarer signal goes first.  Strength
# training sits ahead of generic workouts so StrongLifts exports that also
# mention strain are not taken for WHOOP workouts.
CATEGORY_KEYWORDS: list[tuple[RecordCategory, tuple[str, ...], tuple[tuple[str, ...], ...]]] = [
    (
        RecordCategory.RECOVERY,
        ("recovery", "hrv", "resting heart rate", "rhr", "readiness", "heart rate variability", "skin temp"),
        (),
    ),
    (
        RecordCategory.SLEEP,
        ("sleep", "bed time", "wake time", "rem", "deep sleep", "light sleep"),
        (),
    ),
    (
        RecordCategory.STRONGLIFTS,
        ("exercise", "weight", "reps", "sets", "volume", "1rm", "stronglifts"),
        (("squat", "bench"),),
    ),
    (
        RecordCategory.WORKOUT,
        (
            "strain",
            "workout",
            "activity",
            "kilojoule",
            "max heart rate",
            "average heart rate",
            "calories burned",
        ),
        (),
    ),
    (
        RecordCategory.DAILY,
        ("steps", "daily", "ambient", "temperature", "day strain", "calories"),
        (),
    ),
    (
        RecordCategory.JOURNAL,
        ("journal", "question text", "answered yes", "notes"),
        (("question", "answer"),),
    ),
]

EXPECTED_HEADERS_HINT = (
    "Expected WHOOP or StrongLifts data with headers like 'Recovery score %', "
    "'Sleep efficiency %', 'Activity Strain', 'Steps', 'Question text' or 'Exercise'."
)


def classify_headers(headers: list[str]) -> RecordCategory:
    """Return the category a header row describes, or ``UNKNOWN``."""
    joined = ",".join(headers).lower()

    for category, keywords, joint_keywords in CATEGORY_KEYWORDS:
        if any(k in joined for k in keywords):
            return category
        if any(all(k in joined for k in group) for group in joint_keywords):
            return category

    return RecordCategory.UNKNOWN


def describe_unrecognized(headers: list[str]) -> str:
    """Error text for a header row no category matched."""
    return f"Could not detect data type from headers: {', '.join(headers)}. {EXPECTED_HEADERS_HINT}"
