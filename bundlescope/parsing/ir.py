from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Literal

from bundlescope.analysis.insight import OptimizationInsight

FileType = Literal["vanilla", "bundle", "module", "unknown"]
FunctionKind = Literal["function", "arrow", "async"]
ImportKind = Literal["es6", "commonjs", "dynamic"]
ExportKind = Literal["named", "default", "all"]

@dataclass(frozen=True)
class FunctionInfo:
    name: str
    kind: FunctionKind
    line_start: int
    line_end: int
    size_chars: int
    complexity: int
    parameters: list[str] = field(default_factory=list)

@dataclass(frozen=True)
class ClassInfo:
    name: str
    line_start: int
    line_end: int
    size_chars: int
    methods: list[str] = field(default_factory=list)
    properties: list[str] = field(default_factory=list)
    extends: Optional[str] = None
    implements: list[str] = field(default_factory=list)

@dataclass(frozen=True)
class ImportInfo:
    source: str
    kind: ImportKind
    items: list[str]
    line: int

@dataclass(frozen=True)
class ExportInfo:
    kind: ExportKind
    items: list[str]
    line: int

@dataclass(frozen=True)
class LibraryUsage:
    name: str
    confidence: float
    matched_pattern_ids: list[str]
    usage_count: int

@dataclass(frozen=True)
class CodeMetrics:
    total_lines: int = 0
    code_lines: int = 0
    comment_lines: int = 0
    empty_lines: int = 0
    function_count: int = 0
    class_count: int = 0
    import_count: int = 0
    export_count: int = 0
    average_function_size: int = 0
    average_class_size: int = 0
    cyclomatic_complexity: int = 0

@dataclass(frozen=True)
class JavaScriptAnalysis:
    file_type: FileType
    confidence: int
    functions: list[FunctionInfo]
    classes: list[ClassInfo]
    imports: list[ImportInfo]
    exports: list[ExportInfo]
    dependencies: list[str]
    libraries: list[LibraryUsage]
    code_metrics: CodeMetrics
    optimization_opportunities: list[str] = field(default_factory=list)
    # per-file findings; the analyzer itself leaves this empty
    insights: list[OptimizationInsight] = field(default_factory=list)
