from __future__ import annotations
from pathlib import Path
from typing import Dict, List, Any, Sequence

from bundlescope.analysis.insight import OptimizationInsight
from bundlescope.analysis.runner import AnalysisRun
from bundlescope.analysis.scoring import PerformanceReport
from bundlescope.ingestion.model import BundleAggregate, Chunk, Module
from bundlescope.utils.formatting import format_percent, format_seconds, format_size

_IMPACT_ORDER = {"high": 0, "medium": 1, "low": 2}


def _append(out_path: Path, lines: List[str]) -> None:
    with out_path.open("a", encoding="utf-8") as fh:
        fh.write("".join(lines))

def _cell(text: Any) -> str:
    return str(text).replace("|", "\\|").replace("\n", " ")


# ---------- TOC and summary ----------

def _toc(with_performance: bool) -> str:
    toc = (
        "\n- [Summary](#summary)\n"
        "- [Composition](#composition)\n"
        "- [Largest modules](#largest-modules)\n"
        "- [Chunks](#chunks)\n"
        "- [Insights](#insights)\n"
    )
    if with_performance:
        toc += "- [Performance](#performance)\n"
    return toc + "- [Dependencies](#dependencies)\n"

def write_summary(bundle: BundleAggregate, out_dir: Path, with_performance: bool = True) -> Path:
    out_dir.mkdir(parents=True, exist_ok=True)
    out_path = out_dir / "report.md"

    ratio = bundle.compression_ratio
    lines: List[str] = []
    lines.append("# Bundle Analysis Report\n")
    lines.append(_toc(with_performance))
    lines.append("\n## Summary\n")
    lines.append(f"- Analyzed at: {bundle.metadata.analyzed_at}\n")
    lines.append(f"- Files analyzed: {bundle.metadata.file_count} ({', '.join(bundle.metadata.file_types) or 'none'})\n")
    lines.append(f"- Total size: {format_size(bundle.total_size)}\n")
    lines.append(f"- Gzipped size: {format_size(bundle.total_gzip_size)}\n")
    if ratio is None:
        lines.append("- Compression: n/a\n")
    else:
        lines.append(f"- Compression: {ratio:.1f}% saved\n")
    lines.append(f"- Modules: {len(bundle.modules)}  |  Chunks: {len(bundle.chunks)}  |  Insights: {len(bundle.insights)}\n")

    out_path.write_text("".join(lines), encoding="utf-8")
    return out_path


# ---------- Composition ----------

def append_type_breakdown(out_path: Path, bundle: BundleAggregate) -> None:
    groups: Dict[str, List[Module]] = {}
    for m in bundle.modules:
        groups.setdefault(m.type, []).append(m)

    lines: List[str] = ["\n## Composition\n"]
    if not groups:
        lines.append("- No modules found.\n")
    else:
        lines.append("| Type | Modules | Size | Share |\n")
        lines.append("|---|---:|---:|---:|\n")
        for kind, items in sorted(groups.items(), key=lambda kv: -sum(m.size for m in kv[1])):
            size = sum(m.size for m in items)
            lines.append(f"| {kind} | {len(items)} | {format_size(size)} | {format_percent(size, bundle.total_size)} |\n")
        external = [m for m in bundle.modules if m.is_external]
        if external:
            size = sum(m.size for m in external)
            lines.append(f"\n- External (node_modules): {len(external)} modules, {format_size(size)}\n")
    _append(out_path, lines)


def append_largest_modules(out_path: Path, modules: Sequence[Module], max_rows: int = 10) -> None:
    lines: List[str] = ["\n## Largest modules\n"]
    if not modules:
        lines.append("- No modules found.\n")
    else:
        lines.append("| Module | Type | Size | Gzip | Chunk |\n")
        lines.append("|---|---|---:|---:|---|\n")
        for m in sorted(modules, key=lambda m: m.size, reverse=True)[:max_rows]:
            lines.append(
                f"| {_cell(m.name)} | {m.type} | {format_size(m.size)} | "
                f"{format_size(m.effective_gzip_size)} | {m.chunk_id or '-'} |\n"
            )
    _append(out_path, lines)

def append_chunks(out_path: Path, chunks: Sequence[Chunk]) -> None:
    lines: List[str] = ["\n## Chunks\n"]
    if not chunks:
        lines.append("- No chunk information.\n")
    else:
        lines.append("| Chunk | Entry | Modules | Size | Gzip |\n")
        lines.append("|---|:---:|---:|---:|---:|\n")
        for c in chunks:
            entry = "yes" if c.is_entry else ""
            lines.append(
                f"| {_cell(c.name)} | {entry} | {len(c.module_ids)} | "
                f"{format_size(c.size)} | {format_size(c.gzip_size)} |\n"
            )
    _append(out_path, lines)


# ---------- Insights ----------

def append_insights(out_path: Path, insights: Sequence[OptimizationInsight]) -> None:
    lines: List[str] = ["\n## Insights\n"]
    if not insights:
        lines.append("- No insights.\n")
        _append(out_path, lines)
        return

    ordered = sorted(insights, key=lambda i: _IMPACT_ORDER.get(i.impact, 3))
    for ins in ordered:
        lines.append(f"\n### [{ins.impact}] {ins.title}\n")
        lines.append(f"- Kind: {ins.kind}  |  Category: {ins.category}\n")
        lines.append(f"- Why: {ins.description}\n")
        lines.append(f"- Fix: {ins.recommendation}\n")
        if ins.estimated_savings_bytes:
            lines.append(f"- Estimated savings: {format_size(ins.estimated_savings_bytes)}\n")
    _append(out_path, lines)


# ---------- Performance ----------

def append_performance(out_path: Path, report: PerformanceReport) -> None:
    est = report.load_time_estimates
    cp = report.critical_path
    lines: List[str] = ["\n## Performance\n"]
    lines.append(f"- Score: {report.performance_score}/100 ({report.score_label})\n")
    lines.append("\n| Network | Load time |\n")
    lines.append("|---|---:|\n")
    lines.append(f"| Slow 3G | {format_seconds(est.slow_3g)} |\n")
    lines.append(f"| Fast 3G | {format_seconds(est.fast_3g)} |\n")
    lines.append(f"| Fast 4G | {format_seconds(est.fast_4g)} |\n")
    lines.append(f"| WiFi | {format_seconds(est.wifi)} |\n")

    lines.append("\n### Critical path\n")
    lines.append(f"- Blocking time: {cp.total_blocking_time_ms:.1f} ms\n")
    for m in cp.blocking_modules:
        lines.append(f"  - {m.name} ({format_size(m.size)})\n")
    for opp in cp.opportunities:
        lines.append(f"- {opp}\n")

    lines.append("\n### Recommendations\n")
    for rec in report.recommendations:
        lines.append(f"- {rec}\n")
    _append(out_path, lines)


# ---------- Dependencies ----------

def append_dependencies(out_path: Path, metrics: dict) -> None:
    fan_in = metrics.get("fan_in", {}) or {}
    top_fan_in = metrics.get("top_fan_in", []) or []
    top_fan_out = metrics.get("top_fan_out", []) or []
    cycles = metrics.get("cycles", []) or []

    lines: List[str] = []
    lines.append("\n## Dependencies\n")
    lines.append(f"- Nodes: {len(fan_in)}\n")
    lines.append(f"- Edges: {sum(int(v) for v in fan_in.values())}\n")
    lines.append("- Most depended on:\n")
    for n, v in list(top_fan_in)[:5]:
        lines.append(f"  - {n}: {int(v)}\n")
    lines.append("- Most dependencies:\n")
    for n, v in list(top_fan_out)[:5]:
        lines.append(f"  - {n}: {int(v)}\n")
    unresolved = metrics.get("unresolved", []) or []
    if unresolved:
        lines.append(f"- Outside the bundle: {', '.join(unresolved[:10])}\n")
    lines.append(f"- Cycles detected: {len(cycles)}\n")
    for c in list(cycles)[:5]:
        lines.append(f"  - {' -> '.join(str(x) for x in c)}\n")
    _append(out_path, lines)


def write_markdown_report(run: AnalysisRun, out_dir: Path, top_modules: int = 10) -> Path:
    out_path = write_summary(run.bundle, out_dir, with_performance=run.performance is not None)
    append_type_breakdown(out_path, run.bundle)
    append_largest_modules(out_path, run.bundle.modules, max_rows=top_modules)
    append_chunks(out_path, run.bundle.chunks)
    append_insights(out_path, run.bundle.insights)
    if run.performance is not None:
        append_performance(out_path, run.performance)
    append_dependencies(out_path, run.dep_metrics.as_dict())
    return out_path
