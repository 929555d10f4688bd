from __future__ import annotations
from typing import Optional

from bundlescope.analysis.insight import OptimizationInsight
from bundlescope.analysis.scoring import KIB, MIB, NETWORK_PROFILES, load_time_seconds
from bundlescope.utils.formatting import format_size

SLOW_FAST_3G_SECONDS = 3
POOR_COMPRESSION_PERCENT = 30

def detect_performance_tier(total_size: float, ratio: Optional[float]) -> list[OptimizationInsight]:
    """Exactly one tier insight: slow mobile load, then poor compression, then size."""
    fast_3g = load_time_seconds(total_size, NETWORK_PROFILES["fast_3g"])
    if fast_3g > SLOW_FAST_3G_SECONDS:
        return [OptimizationInsight(
            id="slow-3g-load",
            kind="warning",
            title="Slow Loading on Mobile Networks",
            description=(
                f"Your bundle takes {fast_3g:.1f}s to load on fast 3G networks, "
                "which may impact mobile user experience."
            ),
            impact="high",
            recommendation="Implement aggressive code splitting and lazy loading to improve mobile performance.",
            category="performance",
        )]

    if ratio is not None and ratio < POOR_COMPRESSION_PERCENT:
        return [OptimizationInsight(
            id="poor-compression",
            kind="warning",
            title="Poor Compression Efficiency",
            description=f"Your bundle only compresses by {ratio:.1f}%, which is below the typical 30-70% range.",
            impact="medium",
            recommendation=(
                "Review your code for opportunities to improve compression "
                "(remove comments, minify, use shorter variable names)."
            ),
            category="performance",
        )]

    size = format_size(total_size)
    if total_size > MIB:
        return [OptimizationInsight(
            id="large-bundle-performance",
            kind="warning",
            title="Large Bundle Size",
            description=f"Your total bundle size is {size}, which may impact loading performance.",
            impact="high",
            recommendation=(
                "Consider implementing code splitting, lazy loading, and analyzing "
                "dependencies for optimization opportunities."
            ),
            category="performance",
        )]
    if total_size > 500 * KIB:
        return [OptimizationInsight(
            id="medium-bundle-performance",
            kind="info",
            title="Moderate Bundle Size",
            description=f"Your bundle size is {size}, which is acceptable but could be optimized further.",
            impact="medium",
            recommendation="Implement code splitting for non-critical features to improve initial load time.",
            category="performance",
        )]
    return [OptimizationInsight(
        id="good-bundle-size",
        kind="success",
        title="Good Bundle Size",
        description=f"Your bundle size is {size}, which is excellent for performance.",
        impact="low",
        recommendation="Maintain this size and focus on other optimization areas like caching and delivery.",
        category="performance",
    )]
