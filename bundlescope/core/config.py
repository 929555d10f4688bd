from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

@dataclass
class AnalyzeConfig:
    paths: List[Path]
    extensions: List[str]
    max_total_bytes: int
    output_dir: Path
    exclude: List[str] = field(default_factory=list)
    top_modules: int = 10
    with_performance: bool = True
    settings_path: Path | None = None

    @classmethod
    def from_settings(cls, paths: List[Path], output_dir: Path, settings: dict, **overrides) -> "AnalyzeConfig":
        ingest = settings.get("ingest", {})
        report = settings.get("report", {})
        return cls(
            paths=list(paths),
            extensions=[str(e).lower() for e in ingest.get("extensions", [])],
            max_total_bytes=int(ingest.get("max_total_bytes", 0)),
            output_dir=output_dir,
            exclude=list(ingest.get("exclude", []) or []),
            top_modules=int(report.get("top_modules", 10)),
            **overrides,
        )

    def resolve_output_dir(self) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        return self.output_dir
