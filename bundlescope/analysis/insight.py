from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Literal, Optional

InsightKind = Literal["warning", "info", "success", "error"]
Impact = Literal["low", "medium", "high"]
Category = Literal["dependency", "code-splitting", "tree-shaking", "duplicates", "performance"]

@dataclass(frozen=True)
class OptimizationInsight:
    id: str
    kind: InsightKind
    title: str
    description: str
    impact: Impact
    recommendation: str
    category: Category
    estimated_savings_bytes: Optional[float] = None

def large_dependency_fix(module_name: str) -> str:
    name = (module_name or "").lower()
    if "moment" in name:
        return "Consider replacing moment.js with dayjs or date-fns for smaller bundle size."
    if "lodash" in name:
        return "Use lodash-es or import specific functions instead of the full library."
    if "jquery" in name:
        return "Consider using native DOM APIs or lighter alternatives like zepto.js."
    return "Analyze if this dependency is necessary or if there are lighter alternatives available."

def dedupe_ids(insights: list[OptimizationInsight]) -> list[OptimizationInsight]:
    """Suffix repeated ids with -2, -3, ... so ids are unique within one run."""
    taken: set[str] = set()
    out: list[OptimizationInsight] = []
    for ins in insights:
        candidate, n = ins.id, 1
        while candidate in taken:
            n += 1
            candidate = f"{ins.id}-{n}"
        taken.add(candidate)
        out.append(ins if candidate == ins.id else replace(ins, id=candidate))
    return out
