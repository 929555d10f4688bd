from __future__ import annotations

from bundlescope.analysis.insight import OptimizationInsight
from bundlescope.ingestion.model import Chunk, Module
from bundlescope.utils.formatting import format_size

LARGE_CHUNK_BYTES = 200 * 1024
SPLIT_SAVINGS_RATIO = 0.4
TREE_SHAKING_JS_MODULES = 50

def detect_large_chunks(chunks: list[Chunk]) -> list[OptimizationInsight]:
    large = sorted((c for c in chunks if c.size > LARGE_CHUNK_BYTES), key=lambda c: c.size, reverse=True)
    return [
        OptimizationInsight(
            id=f"code-split-{c.id}",
            kind="info",
            title="Code Splitting Opportunity",
            description=f'The chunk "{c.name}" is {format_size(c.size)} and could benefit from code splitting.',
            impact="medium",
            recommendation=(
                "Consider implementing dynamic imports or route-based code splitting "
                "to reduce initial bundle size."
            ),
            category="code-splitting",
            estimated_savings_bytes=c.size * SPLIT_SAVINGS_RATIO,
        )
        for c in large
    ]

def detect_tree_shaking(modules: list[Module]) -> list[OptimizationInsight]:
    js = sum(1 for m in modules if m.type == "js")
    if js <= TREE_SHAKING_JS_MODULES:
        return []
    return [OptimizationInsight(
        id="tree-shaking",
        kind="info",
        title="Tree Shaking Potential",
        description=(
            f"Your bundle contains {js} JavaScript modules. "
            "Tree shaking could help eliminate unused code."
        ),
        impact="medium",
        recommendation="Ensure your bundler is configured for tree shaking and use ES6 modules consistently.",
        category="tree-shaking",
    )]
