from __future__ import annotations

from pathlib import Path
import sys
import typer

from loguru import logger
from rich.console import Console
from rich.table import Table

# Analysis pipeline
from bundlescope.core.config import AnalyzeConfig
from bundlescope.core.errors import IngestLimitError, SettingsError
from bundlescope.ingestion.walker import collect_files
from bundlescope.analysis.runner import AnalysisRun, run_analysis
from bundlescope.presets import DEFAULT_SETTINGS, DEFAULT_SETTINGS_PATH, load_settings, save_settings
from bundlescope.utils.formatting import format_seconds, format_size

# Reporting
from bundlescope.reporting.markdown import write_markdown_report
from bundlescope.reporting.exporters import export_dependency_graph, export_json_report


app = typer.Typer(add_completion=False, help="Bundle analyzer: composition, optimization insights and load-time estimates")
console = Console()


def _configure_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")


def _print_modules(run: AnalysisRun, max_rows: int) -> None:
    table = Table(title="Largest Modules")
    table.add_column("Module", overflow="fold")
    table.add_column("Type", justify="center")
    table.add_column("Size", justify="right")
    table.add_column("Gzip", justify="right")
    table.add_column("Chunk")
    modules = sorted(run.bundle.modules, key=lambda m: m.size, reverse=True)
    for m in modules[:max_rows]:
        table.add_row(m.name, m.type, format_size(m.size), format_size(m.effective_gzip_size), m.chunk_id or "-")
    console.print(table)
    if len(modules) > max_rows:
        console.print(f"... and {len(modules) - max_rows} more")


def _print_insights(run: AnalysisRun) -> None:
    colors = {"error": "red", "warning": "yellow", "info": "blue", "success": "green"}
    table = Table(title="Optimization Insights")
    table.add_column("Impact", justify="center")
    table.add_column("Category")
    table.add_column("Title", overflow="fold")
    table.add_column("Savings", justify="right")
    for ins in run.bundle.insights:
        color = colors.get(ins.kind, "white")
        savings = format_size(ins.estimated_savings_bytes) if ins.estimated_savings_bytes else ""
        table.add_row(ins.impact, ins.category, f"[{color}]{ins.title}[/]", savings)
    console.print(table)


def _print_performance(run: AnalysisRun) -> None:
    perf = run.performance
    if perf is None:
        return
    est = perf.load_time_estimates
    console.print(f"[bold]Performance score:[/] {perf.performance_score}/100 ({perf.score_label})")
    console.print(
        f"Load time: slow 3G {format_seconds(est.slow_3g)} | fast 3G {format_seconds(est.fast_3g)} | "
        f"fast 4G {format_seconds(est.fast_4g)} | wifi {format_seconds(est.wifi)}"
    )


@app.command("analyze")
def analyze(
    paths: list[Path] = typer.Argument(..., help="Build artifacts or folders (.js, .json stats, .map)"),
    output_dir: str = typer.Option("reports", help="Output directory for reports"),
    settings_file: str = typer.Option(str(DEFAULT_SETTINGS_PATH), "--settings", help="Settings file"),
    performance: bool = typer.Option(True, "--performance/--no-performance", help="Estimate load times and score"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log per-file decisions"),
) -> None:
    _configure_logging(verbose)

    try:
        settings = load_settings(Path(settings_file))
    except SettingsError as e:
        typer.secho(str(e), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)

    cfg = AnalyzeConfig.from_settings(
        paths,
        Path(output_dir),
        settings,
        with_performance=performance,
        settings_path=Path(settings_file),
    )

    console.rule("[bold]Collecting files")
    try:
        files = collect_files(cfg.paths, cfg.extensions, cfg.exclude, cfg.max_total_bytes)
    except IngestLimitError as e:
        typer.secho(str(e), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)
    if not files:
        typer.secho("No files matched the allowed extensions.", fg=typer.colors.YELLOW)
        raise typer.Exit(code=0)

    table = Table(title="Input Files")
    table.add_column("File", overflow="fold")
    table.add_column("Bytes", justify="right")
    for f in files[:50]:
        table.add_row(str(f.path), str(f.size_bytes))
    console.print(table)
    if len(files) > 50:
        console.print(f"... and {len(files) - 50} more")

    console.rule("[bold]Analyzing bundle")
    run = run_analysis(files, with_performance=cfg.with_performance)
    bundle = run.bundle
    console.print(
        f"[green]Total:[/] {format_size(bundle.total_size)} "
        f"([green]gzip[/] {format_size(bundle.total_gzip_size)}) in {len(bundle.modules)} modules, "
        f"{len(bundle.chunks)} chunks"
    )
    _print_modules(run, cfg.top_modules)
    _print_insights(run)
    _print_performance(run)

    console.rule("[bold]Writing reports")
    try:
        out_dir = cfg.resolve_output_dir()
        md_out = write_markdown_report(run, out_dir, top_modules=cfg.top_modules)
        json_out = export_json_report(out_dir, run)
        dep_out = export_dependency_graph(run.dep_graph, out_dir)
    except OSError as e:
        typer.secho(f"Report export failed: {e}", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    typer.secho(f"Wrote artifacts: {md_out}, {json_out}, {dep_out}", fg=typer.colors.GREEN)


@app.command("init-settings")
def init_settings(
    settings_file: str = typer.Option(str(DEFAULT_SETTINGS_PATH), "--settings", help="Where to write the settings file"),
    force: bool = typer.Option(False, help="Overwrite an existing file"),
) -> None:
    """Write the default settings so they can be edited."""
    target = Path(settings_file)
    if target.exists() and not force:
        typer.secho(f"{target} already exists; use --force to overwrite", fg=typer.colors.YELLOW, err=True)
        raise typer.Exit(code=1)
    outp = save_settings(DEFAULT_SETTINGS, target)
    console.print(f"[green]Wrote default settings to {outp}[/]")

    tbl = Table(title="Default settings")
    tbl.add_column("Key")
    tbl.add_column("Value")
    for section, values in DEFAULT_SETTINGS.items():
        for k, v in values.items():
            tbl.add_row(f"{section}.{k}", str(v))
    console.print(tbl)


if __name__ == "__main__":
    app()
