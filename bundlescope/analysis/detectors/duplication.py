from __future__ import annotations
from collections import Counter

from bundlescope.analysis.insight import OptimizationInsight
from bundlescope.ingestion.model import Module

def duplicate_occurrences(modules: list[Module]) -> int:
    """Occurrences beyond the first of every repeated module name."""
    counts = Counter(m.name for m in modules)
    return sum(n - 1 for n in counts.values() if n > 1)

def duplicated_names(modules: list[Module]) -> list[str]:
    counts = Counter(m.name for m in modules)
    return [name for name, n in counts.items() if n > 1]

def detect_duplicates(modules: list[Module]) -> list[OptimizationInsight]:
    extra = duplicate_occurrences(modules)
    if extra == 0:
        return []
    return [OptimizationInsight(
        id="duplicates",
        kind="warning",
        title="Duplicate Modules Detected",
        description=f"Found {extra} duplicate module names, which may indicate redundant dependencies.",
        impact="medium",
        recommendation=(
            "Check for duplicate package installations and consider using bundle "
            "analyzer plugins to identify duplicates."
        ),
        category="duplicates",
    )]
