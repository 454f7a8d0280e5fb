"""Phrase duplicate detection shared by single and bulk phrase inserts.

Comparison model:
    Two phrase texts are duplicates when their comparison forms are equal. The
    comparison form is trimmed, lower-cased, with internal whitespace runs
    collapsed to one space.

Snapshot semantics:
    `plan_bulk_insert` never reads storage itself. Callers pass the existing
    phrase texts of the target category as an explicit snapshot taken before
    any insert of the batch happens.

Determinism:
    Pure functions; output depends only on arguments and candidate order.
"""

import re
from dataclasses import dataclass, field
from typing import Iterable, List

_WHITESPACE_RUN = re.compile(r"\s+")


@dataclass
class BulkInsertPlan:
    """Outcome of duplicate filtering for one batch.

    Attributes:
        to_insert: Trimmed candidate texts to persist, in input order.
        duplicates: Trimmed candidate texts skipped as duplicates, as the user
            typed them (not the comparison form).
    """

    to_insert: List[str] = field(default_factory=list)
    duplicates: List[str] = field(default_factory=list)


def normalize_for_comparison(text: str) -> str:
    """Return the case- and whitespace-insensitive comparison form of `text`."""
    return _WHITESPACE_RUN.sub(" ", text.strip().lower())


def split_lines(lines: str) -> List[str]:
    """Split bulk-input text on newlines, trimming and dropping blank lines."""
    return [line.strip() for line in lines.split("\n") if line.strip()]


def plan_bulk_insert(candidates: Iterable[str], existing: Iterable[str]) -> BulkInsertPlan:
    """Partition candidate phrase texts into inserts and duplicates.

    Args:
        candidates: Candidate phrase texts in submission order.
        existing: Snapshot of phrase texts already stored in the category.

    Returns:
        `BulkInsertPlan` where the first occurrence of each comparison form is
        kept and every later one (or one already stored) is reported.

    Edge cases:
        - Blank candidates are ignored and reported nowhere.
        - A candidate duplicating a stored phrase is skipped even when it is
          the first of its form in the batch.
    """
    existing_forms = {normalize_for_comparison(text) for text in existing}
    seen = set()
    plan = BulkInsertPlan()

    for candidate in candidates:
        text = candidate.strip()
        if not text:
            continue
        form = normalize_for_comparison(text)
        if form in existing_forms or form in seen:
            plan.duplicates.append(text)
            continue
        seen.add(form)
        plan.to_insert.append(text)

    return plan
