from __future__ import annotations

from bundlescope.analysis.detectors.code_splitting import detect_large_chunks, detect_tree_shaking
from bundlescope.analysis.detectors.composition import (
    detect_composition,
    detect_compression,
    detect_module_count,
    detect_type_diversity,
)
from bundlescope.analysis.detectors.dependencies import detect_large_modules
from bundlescope.analysis.detectors.duplication import detect_duplicates
from bundlescope.analysis.detectors.performance import detect_performance_tier
from bundlescope.analysis.insight import OptimizationInsight, dedupe_ids
from bundlescope.ingestion.model import (
    Chunk,
    Module,
    compression_ratio,
    total_gzip_size_of,
    total_size_of,
)

def generate_insights(modules: list[Module], chunks: list[Chunk]) -> list[OptimizationInsight]:
    """Run every rule family once; families are independent and all firing ones are kept."""
    total = total_size_of(modules)
    ratio = compression_ratio(total, total_gzip_size_of(modules))

    insights: list[OptimizationInsight] = []
    insights += detect_composition(modules)
    insights += detect_compression(ratio)
    insights += detect_module_count(modules)
    insights += detect_performance_tier(total, ratio)
    insights += detect_type_diversity(modules)
    insights += detect_large_modules(modules)
    insights += detect_large_chunks(chunks)
    insights += detect_tree_shaking(modules)
    insights += detect_duplicates(modules)
    return dedupe_ids(insights)
