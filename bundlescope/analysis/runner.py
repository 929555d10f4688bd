from __future__ import annotations

import asyncio
import typing as t
from dataclasses import dataclass

import networkx as nx
from loguru import logger

from bundlescope.analysis.dependency_graph import DepMetrics, build_dep_graph
from bundlescope.analysis.scoring import PerformanceReport, score
from bundlescope.ingestion.bundle import ingest
from bundlescope.ingestion.model import BundleAggregate
from bundlescope.ingestion.sources import SourceFile

@dataclass(frozen=True)
class AnalysisRun:
    bundle: BundleAggregate
    performance: t.Optional[PerformanceReport]
    dep_graph: nx.DiGraph
    dep_metrics: DepMetrics

async def analyze_bundle(files: t.Sequence[SourceFile], with_performance: bool = True) -> AnalysisRun:
    bundle = await ingest(files)
    performance = score(bundle) if with_performance else None
    if performance is not None:
        logger.info(f"Performance score {performance.performance_score} ({performance.score_label})")
    graph, metrics = build_dep_graph(bundle.modules)
    return AnalysisRun(bundle=bundle, performance=performance, dep_graph=graph, dep_metrics=metrics)

def run_analysis(files: t.Sequence[SourceFile], with_performance: bool = True) -> AnalysisRun:
    return asyncio.run(analyze_bundle(files, with_performance=with_performance))
