from __future__ import annotations
from dataclasses import dataclass, field
from typing import Literal, Optional

from bundlescope.analysis.insight import OptimizationInsight
from bundlescope.parsing.ir import JavaScriptAnalysis

ModuleType = Literal["js", "css", "json", "map", "other"]

GZIP_ESTIMATE_RATIO = 0.3

@dataclass(frozen=True)
class Module:
    id: str
    name: str
    size: float
    path: list[str]
    type: ModuleType
    gzip_size: Optional[float] = None
    dependencies: list[str] = field(default_factory=list)
    is_external: bool = False
    chunk_id: Optional[str] = None
    javascript_analysis: Optional[JavaScriptAnalysis] = None

    @property
    def effective_gzip_size(self) -> float:
        # zero counts as unmeasured
        return self.gzip_size or self.size * GZIP_ESTIMATE_RATIO

@dataclass(frozen=True)
class Chunk:
    id: str
    name: str
    size: float
    gzip_size: float
    module_ids: list[str] = field(default_factory=list)
    is_entry: bool = False

@dataclass(frozen=True)
class BundleMetadata:
    analyzed_at: str
    file_count: int
    file_types: list[str]

@dataclass(frozen=True)
class BundleAggregate:
    total_size: float
    total_gzip_size: float
    modules: list[Module]
    chunks: list[Chunk]
    insights: list[OptimizationInsight]
    metadata: BundleMetadata

    @property
    def compression_ratio(self) -> Optional[float]:
        """Percent of bytes saved by compression; None for an empty bundle."""
        return compression_ratio(self.total_size, self.total_gzip_size)

def compression_ratio(total_size: float, total_gzip_size: float) -> Optional[float]:
    if not total_size:
        return None
    return (total_size - total_gzip_size) / total_size * 100

def total_size_of(modules: list[Module]) -> float:
    return sum(m.size for m in modules)

def total_gzip_size_of(modules: list[Module]) -> float:
    return sum(m.effective_gzip_size for m in modules)
