from __future__ import annotations
from dataclasses import asdict
from typing import List, Dict, Optional, Tuple, Union
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from bundlescope.analysis.insight import Category, Impact, InsightKind
from bundlescope.analysis.scoring import PerformanceReport
from bundlescope.ingestion.model import BundleAggregate, ModuleType
from bundlescope.parsing.ir import ExportKind, FileType, FunctionKind, ImportKind

Number = Union[int, float]

class _CamelModel(BaseModel):
    """Field names stay snake_case in Python and dump as camelCase by alias."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

# ---------- JavaScript analysis ----------

class FunctionJSON(_CamelModel):
    name: str
    kind: FunctionKind
    line_start: int = Field(..., ge=1)
    line_end: int = Field(..., ge=1)
    size_chars: int = Field(..., ge=0)
    complexity: int = Field(..., ge=1)
    parameters: List[str]

class ClassJSON(_CamelModel):
    name: str
    line_start: int = Field(..., ge=1)
    line_end: int = Field(..., ge=1)
    size_chars: int = Field(..., ge=0)
    methods: List[str]
    properties: List[str]
    extends: Optional[str] = None
    implements: List[str] = Field(default_factory=list)

class ImportJSON(_CamelModel):
    source: str
    kind: ImportKind
    items: List[str]
    line: int = Field(..., ge=1)

class ExportJSON(_CamelModel):
    kind: ExportKind
    items: List[str]
    line: int = Field(..., ge=1)

class LibraryJSON(_CamelModel):
    name: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    matched_pattern_ids: List[str]
    usage_count: int = Field(..., ge=1)

class CodeMetricsJSON(_CamelModel):
    total_lines: int
    code_lines: int
    comment_lines: int
    empty_lines: int
    function_count: int
    class_count: int
    import_count: int
    export_count: int
    average_function_size: int
    average_class_size: int
    cyclomatic_complexity: int

class JavaScriptAnalysisJSON(_CamelModel):
    file_type: FileType
    confidence: int = Field(..., ge=0, description="Not capped at 100 on pattern-dense input")
    functions: List[FunctionJSON]
    classes: List[ClassJSON]
    imports: List[ImportJSON]
    exports: List[ExportJSON]
    dependencies: List[str]
    libraries: List[LibraryJSON]
    code_metrics: CodeMetricsJSON
    optimization_opportunities: List[str]
    insights: List["InsightJSON"] = Field(default_factory=list)

# ---------- Bundle ----------

class InsightJSON(_CamelModel):
    id: str
    kind: InsightKind
    title: str
    description: str
    impact: Impact
    recommendation: str
    estimated_savings_bytes: Optional[Number] = None
    category: Category

class ModuleJSON(_CamelModel):
    id: str
    name: str
    size: Number
    gzip_size: Optional[Number] = None
    path: List[str]
    dependencies: List[str]
    is_external: bool
    type: ModuleType
    chunk_id: Optional[str] = None
    javascript_analysis: Optional[JavaScriptAnalysisJSON] = None

class ChunkJSON(_CamelModel):
    id: str
    name: str
    size: Number
    gzip_size: Number
    module_ids: List[str]
    is_entry: bool

class MetadataJSON(_CamelModel):
    analyzed_at: str
    file_count: int = Field(..., ge=0)
    file_types: List[str]

class BundleJSON(_CamelModel):
    total_size: Number
    total_gzip_size: Number
    modules: List[ModuleJSON]
    chunks: List[ChunkJSON]
    insights: List[InsightJSON]
    metadata: MetadataJSON

# ---------- Performance ----------

class LoadTimeJSON(_CamelModel):
    fast_3g: float = Field(..., alias="fast3G")
    slow_3g: float = Field(..., alias="slow3G")
    fast_4g: float = Field(..., alias="fast4G")
    wifi: float

class CriticalPathJSON(_CamelModel):
    blocking_modules: List[ModuleJSON]
    total_blocking_time_ms: float
    opportunities: List[str]

class PerformanceJSON(_CamelModel):
    load_time_estimates: LoadTimeJSON
    critical_path: CriticalPathJSON
    performance_score: int = Field(..., ge=0, le=100)
    score_label: str
    recommendations: List[str]

# ---------- Dependencies ----------

class DepMetricsJSON(BaseModel):
    fan_in: Dict[str, int] = Field(..., description="In-degree per node (module or specifier)")
    fan_out: Dict[str, int] = Field(..., description="Out-degree per node (module or specifier)")
    cycles: List[List[str]] = Field(..., description="Detected simple cycles (truncated)")
    top_fan_in: List[Tuple[str, int]] = Field(..., description="Top nodes by fan-in")
    top_fan_out: List[Tuple[str, int]] = Field(..., description="Top nodes by fan-out")
    unresolved: List[str] = Field(default_factory=list, description="Specifiers naming no module in the bundle")

class ReportJSON(_CamelModel):
    bundle: BundleJSON
    performance: Optional[PerformanceJSON] = None
    dependencies: DepMetricsJSON


def bundle_to_json(bundle: BundleAggregate) -> BundleJSON:
    return BundleJSON.model_validate(asdict(bundle))

def performance_to_json(report: PerformanceReport) -> PerformanceJSON:
    return PerformanceJSON.model_validate(asdict(report))
