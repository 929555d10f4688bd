from __future__ import annotations
from pathlib import Path
import json
import networkx as nx
from bundlescope.analysis.dependency_graph import write_dep_json
from bundlescope.analysis.runner import AnalysisRun
from bundlescope.reporting.schema import (
    ReportJSON,
    DepMetricsJSON,
    bundle_to_json,
    performance_to_json,
)

def export_dependency_graph(G: nx.DiGraph, reports_dir: Path) -> Path:
    out = reports_dir / "dep-graph.json"
    return write_dep_json(G, out)

def build_report_json(run: AnalysisRun) -> ReportJSON:
    return ReportJSON(
        bundle=bundle_to_json(run.bundle),
        performance=performance_to_json(run.performance) if run.performance is not None else None,
        dependencies=DepMetricsJSON(**run.dep_metrics.as_dict()),
    )

def export_json_report(reports_dir: Path, run: AnalysisRun) -> Path:
    out = reports_dir / "report.json"
    out.parent.mkdir(parents=True, exist_ok=True)
    payload = build_report_json(run)
    out.write_text(json.dumps(payload.model_dump(by_alias=True), indent=2), encoding="utf-8")
    return out
