from __future__ import annotations
from typing import Iterable, Optional

from bundlescope.analysis.insight import OptimizationInsight
from bundlescope.ingestion.model import Module

WELL_MODULARIZED_OVER = 10
LIMITED_SEPARATION_AT_MOST = 5
DIVERSE_TYPES_OVER = 2

def detect_composition(modules: list[Module]) -> list[OptimizationInsight]:
    js = sum(1 for m in modules if m.type == "js")
    css = sum(1 for m in modules if m.type == "css")
    other = len(modules) - js - css
    if js == 0:
        return []
    return [OptimizationInsight(
        id="bundle-composition",
        kind="info",
        title="Bundle Composition Analysis",
        description=(
            f"Your bundle contains {js} JavaScript modules, {css} CSS modules, "
            f"and {other} other assets."
        ),
        impact="low",
        recommendation="Consider code splitting JavaScript modules and optimizing CSS delivery for better performance.",
        category="performance",
    )]

def detect_compression(ratio: Optional[float]) -> list[OptimizationInsight]:
    if ratio is None or ratio <= 0:
        return []
    return [OptimizationInsight(
        id="compression-efficiency",
        kind="success",
        title="Good Compression Ratio",
        description=f"Your bundle compresses well with gzip, achieving {ratio:.1f}% size reduction.",
        impact="low",
        recommendation="Ensure your server is configured to serve gzipped content for optimal performance.",
        category="performance",
    )]

def detect_module_count(modules: list[Module]) -> list[OptimizationInsight]:
    n = len(modules)
    if n > WELL_MODULARIZED_OVER:
        return [OptimizationInsight(
            id="module-count",
            kind="info",
            title="Modular Bundle Structure",
            description=f"Your bundle is well-modularized with {n} individual modules.",
            impact="low",
            recommendation="This modular structure enables better caching and code splitting opportunities.",
            category="code-splitting",
        )]
    if n <= LIMITED_SEPARATION_AT_MOST:
        return [OptimizationInsight(
            id="module-count-low",
            kind="warning",
            title="Limited Module Separation",
            description=f"Your bundle has only {n} modules, which may limit caching benefits.",
            impact="medium",
            recommendation=(
                "Consider breaking down large modules into smaller, more focused pieces "
                "for better caching and maintainability."
            ),
            category="code-splitting",
        )]
    return []

def _distinct(values: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(values))

def detect_type_diversity(modules: list[Module]) -> list[OptimizationInsight]:
    types = _distinct(m.type for m in modules)
    if len(types) <= DIVERSE_TYPES_OVER:
        return []
    return [OptimizationInsight(
        id="file-type-diversity",
        kind="info",
        title="Diverse Asset Types",
        description=f"Your bundle includes {len(types)} different file types: {', '.join(types)}.",
        impact="low",
        recommendation=(
            "Ensure each asset type is optimized appropriately "
            "(minification for JS/CSS, compression for images, etc.)."
        ),
        category="performance",
    )]
