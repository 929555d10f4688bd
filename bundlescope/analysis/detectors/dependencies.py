from __future__ import annotations

from bundlescope.analysis.insight import OptimizationInsight, large_dependency_fix
from bundlescope.ingestion.model import Module
from bundlescope.utils.formatting import format_size

LARGE_MODULE_BYTES = 100 * 1024
HUGE_MODULE_BYTES = 500 * 1024
DEPENDENCY_SAVINGS_RATIO = 0.3

def detect_large_modules(modules: list[Module]) -> list[OptimizationInsight]:
    large = sorted((m for m in modules if m.size > LARGE_MODULE_BYTES), key=lambda m: m.size, reverse=True)
    return [
        OptimizationInsight(
            id=f"large-dep-{m.id}",
            kind="warning",
            title="Large Dependency Detected",
            description=(
                f'The module "{m.name}" is {format_size(m.size)} in size, '
                "which may impact bundle performance."
            ),
            impact="high" if m.size > HUGE_MODULE_BYTES else "medium",
            recommendation=large_dependency_fix(m.name),
            category="dependency",
            estimated_savings_bytes=m.size * DEPENDENCY_SAVINGS_RATIO,
        )
        for m in large
    ]
