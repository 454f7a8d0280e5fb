"""
Tests: prompting/dedup.py
"""

from prompt_manager.prompting.dedup import normalize_for_comparison, plan_bulk_insert, split_lines


def test_normalize_for_comparison_folds_case_and_whitespace():
    assert normalize_for_comparison("  Red   Hair ") == normalize_for_comparison("red hair")
    assert normalize_for_comparison("Blue\t\nEyes") == "blue eyes"


def test_bulk_plan_against_empty_snapshot():
    plan = plan_bulk_insert(["Red Hair", "red  hair", "Blue Eyes"], existing=[])
    assert plan.to_insert == ["Red Hair", "Blue Eyes"]
    assert plan.duplicates == ["red  hair"]


def test_bulk_plan_skips_phrases_already_stored():
    plan = plan_bulk_insert(["RED HAIR", "green eyes"], existing=["red hair"])
    assert plan.to_insert == ["green eyes"]
    assert plan.duplicates == ["RED HAIR"]


def test_bulk_plan_ignores_blank_candidates():
    plan = plan_bulk_insert(["", "   ", " smile "], existing=[])
    assert plan.to_insert == ["smile"]
    assert plan.duplicates == []


def test_single_candidate_uses_same_rules():
    plan = plan_bulk_insert(["  Soft   Light "], existing=["soft light"])
    assert plan.to_insert == []
    assert plan.duplicates == ["Soft   Light"]


def test_split_lines():
    assert split_lines("a\n\n  b  \r\nc\n") == ["a", "b", "c"]
