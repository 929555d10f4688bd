from __future__ import annotations
import math
import re
from typing import Iterable

from bundlescope.parsing.ir import (
    ClassInfo,
    CodeMetrics,
    ExportInfo,
    FileType,
    FunctionInfo,
    FunctionKind,
    ImportInfo,
    JavaScriptAnalysis,
    LibraryUsage,
)

# ====== File-type indicators ======
# (family, patterns, weight per match, family weight); order breaks ties.
_INDICATOR_FAMILIES: tuple[tuple[str, tuple[re.Pattern, ...], float, float], ...] = (
    ("webpack", (
        re.compile(r"webpack_require"),
        re.compile(r"__webpack_require__"),
        re.compile(r"webpackJsonp"),
        re.compile(r"webpackChunk"),
        re.compile(r"__webpack_modules__"),
    ), 0.2, 0.4),
    ("bundle", (
        re.compile(r"\(function\s*\("),
        re.compile(r"UMD|AMD|CommonJS"),
        re.compile(r"define\s*\("),
        re.compile(r"module\.exports"),
    ), 0.15, 0.3),
    ("module", (
        re.compile(r"import\s+"),
        re.compile(r"export\s+"),
        re.compile(r"from\s+['\"`]"),
    ), 0.1, 0.2),
    ("vanilla", (
        re.compile(r"function\s+\w+\s*\("),
        re.compile(r"const\s+\w+\s*="),
        re.compile(r"let\s+\w+\s*="),
        re.compile(r"var\s+\w+\s*="),
        re.compile(r"class\s+\w+"),
    ), 0.05, 0.1),
)

# ====== Declarations ======
_FUNCTION_PASSES: tuple[tuple[FunctionKind, re.Pattern], ...] = (
    ("function", re.compile(r"function\s+(\w+)\s*\(([^)]*)\)")),
    ("arrow", re.compile(r"const\s+(\w+)\s*=\s*\(([^)]*)\)\s*=>")),
    ("async", re.compile(r"async\s+function\s+(\w+)\s*\(([^)]*)\)")),
)

_COMPLEXITY_RES = (
    re.compile(r"if\s*\("),
    re.compile(r"else\s*if\s*\("),
    re.compile(r"for\s*\("),
    re.compile(r"while\s*\("),
    re.compile(r"switch\s*\("),
    re.compile(r"\?\s*[^:]+:"),
)

_CLASS_RE = re.compile(
    r"class\s+(\w+)(?:\s+extends\s+(\w+))?(?:\s+implements\s+([^{]+))?\s*\{"
)

_CLASS_METHOD_RES = (
    re.compile(r"(\w+)\s*\([^)]*\)\s*\{"),
    re.compile(r"(\w+)\s*=\s*\([^)]*\)\s*=>"),
    re.compile(r"async\s+(\w+)\s*\([^)]*\)"),
)

_CLASS_PROPERTY_RES = (
    re.compile(r"(\w+)\s*[:=]"),
    re.compile(r"get\s+(\w+)\s*\(\)"),
    re.compile(r"set\s+(\w+)\s*\("),
)

# ====== Imports / exports ======
# import {a, b} from 'x' | import 'x'; default and namespace forms are not matched
_ES6_IMPORT_RE = re.compile(r"""import\s+(?:\{([^}]+)\}\s+from\s+)?['"`]([^'"`]+)['"`]""")
_REQUIRE_RE = re.compile(r"""require\s*\(\s*['"`]([^'"`]+)['"`]\s*\)""")
_DYNAMIC_IMPORT_RE = re.compile(r"""import\s*\(\s*['"`]([^'"`]+)['"`]\s*\)""")

_NAMED_EXPORT_RE = re.compile(r"export\s+(?:const|let|var|function|class)\s+(\w+)")
_DEFAULT_EXPORT_RE = re.compile(r"export\s+default\s+(\w+)")
_EXPORT_ALL_RE = re.compile(r"""export\s+\*\s+from\s+['"`]([^'"`]+)['"`]""")

# ====== Library signatures ======
LIBRARY_SIGNATURES: tuple[tuple[str, float, tuple[re.Pattern, ...]], ...] = (
    ("jQuery", 0.9, (re.compile(r"\$\("), re.compile(r"jQuery\("))),
    ("Lodash", 0.8, (re.compile(r"_\.[a-zA-Z]+"), re.compile(r"lodash"))),
    ("Moment.js", 0.9, (re.compile(r"moment\("), re.compile(r"moment\."))),
    ("Axios", 0.8, (re.compile(r"axios\."), re.compile(r"axios\("))),
    ("React", 0.9, (re.compile(r"React\."), re.compile(r"useState"), re.compile(r"useEffect"))),
    ("Vue", 0.9, (re.compile(r"Vue\."), re.compile(r"createApp"), re.compile(r"ref\("))),
    ("Angular", 0.9, (re.compile(r"angular\."), re.compile(r"@Component"), re.compile(r"@Injectable"))),
    ("Express", 0.8, (re.compile(r"express\("), re.compile(r"app\."), re.compile(r"router\."))),
    ("Node.js", 0.7, (re.compile(r"require\("), re.compile(r"module\.exports"), re.compile(r"process\."))),
)

LARGE_FUNCTION_CHARS = 50
LARGE_CLASS_CHARS = 100
MANY_IMPORTS = 10
HEAVY_LIBRARY_USAGE = 20
HIGH_COMPLEXITY = 10


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))

def _line_of(text: str, offset: int) -> int:
    return text.count("\n", 0, offset) + 1

def _block_end(lines: list[str], line_start: int) -> int:
    """First line after ``line_start`` that is only a closing brace, else the last line.

    Not depth-aware: a nested block closing on its own line ends the scan early.
    """
    for i in range(line_start, len(lines)):
        if lines[i].strip() == "}":
            return i + 1
    return len(lines)

def _span_text(lines: list[str], line_start: int, line_end: int) -> str:
    return "\n".join(lines[line_start - 1:line_end])

def _split_names(raw: str) -> list[str]:
    return [p.strip() for p in raw.split(",") if p.strip()]

def _count(patterns: Iterable[re.Pattern], text: str) -> int:
    return sum(len(p.findall(text)) for p in patterns)


def classify_file_type(text: str) -> tuple[FileType, int]:
    scores: list[tuple[str, float]] = []
    for family, patterns, per_match, family_weight in _INDICATOR_FAMILIES:
        raw = 0.0
        for pattern in patterns:
            hits = len(pattern.findall(text))
            raw += hits * per_match if hits else 0
        scores.append((family, raw * family_weight))

    max_score = max(s for _, s in scores)
    winner = next(name for name, s in scores if s == max_score)
    file_type: FileType = "bundle" if winner == "webpack" else winner  # type: ignore[assignment]
    # Not clamped: pattern-dense input can exceed 100.
    return file_type, _round_half_up(max_score * 100)


def complexity_of(snippet: str) -> int:
    return 1 + _count(_COMPLEXITY_RES, snippet)


def _extract_functions(text: str, lines: list[str]) -> list[FunctionInfo]:
    functions: list[FunctionInfo] = []
    for kind, pattern in _FUNCTION_PASSES:
        for m in pattern.finditer(text):
            start = _line_of(text, m.start())
            end = _block_end(lines, start)
            body = _span_text(lines, start, end)
            functions.append(FunctionInfo(
                name=m.group(1),
                kind=kind,
                line_start=start,
                line_end=end,
                size_chars=len(body),
                complexity=complexity_of(body),
                parameters=_split_names(m.group(2)),
            ))
    return functions


def _first_names(patterns: Iterable[re.Pattern], block: list[str]) -> list[str]:
    names: list[str] = []
    for line in block:
        for pattern in patterns:
            m = pattern.search(line)
            if m:
                names.append(m.group(1))
    return names


def _extract_classes(text: str, lines: list[str]) -> list[ClassInfo]:
    classes: list[ClassInfo] = []
    for m in _CLASS_RE.finditer(text):
        start = _line_of(text, m.start())
        end = _block_end(lines, start)
        block = lines[start - 1:end]
        implements = [i.strip() for i in m.group(3).split(",")] if m.group(3) else []
        classes.append(ClassInfo(
            name=m.group(1),
            line_start=start,
            line_end=end,
            size_chars=len("\n".join(block)),
            methods=_first_names(_CLASS_METHOD_RES, block),
            properties=_first_names(_CLASS_PROPERTY_RES, block),
            extends=m.group(2),
            implements=implements,
        ))
    return classes


def _extract_imports(text: str) -> list[ImportInfo]:
    imports: list[ImportInfo] = []
    for m in _ES6_IMPORT_RE.finditer(text):
        items = _split_names(m.group(1)) if m.group(1) else ["default"]
        imports.append(ImportInfo(source=m.group(2), kind="es6", items=items, line=_line_of(text, m.start())))
    for m in _REQUIRE_RE.finditer(text):
        imports.append(ImportInfo(source=m.group(1), kind="commonjs", items=["default"], line=_line_of(text, m.start())))
    for m in _DYNAMIC_IMPORT_RE.finditer(text):
        imports.append(ImportInfo(source=m.group(1), kind="dynamic", items=["dynamic"], line=_line_of(text, m.start())))
    return imports


def _extract_exports(text: str) -> list[ExportInfo]:
    exports: list[ExportInfo] = []
    for m in _NAMED_EXPORT_RE.finditer(text):
        exports.append(ExportInfo(kind="named", items=[m.group(1)], line=_line_of(text, m.start())))
    for m in _DEFAULT_EXPORT_RE.finditer(text):
        exports.append(ExportInfo(kind="default", items=[m.group(1)], line=_line_of(text, m.start())))
    for m in _EXPORT_ALL_RE.finditer(text):
        exports.append(ExportInfo(kind="all", items=[m.group(1)], line=_line_of(text, m.start())))
    return exports


def detect_libraries(text: str) -> list[LibraryUsage]:
    found: list[LibraryUsage] = []
    for name, confidence, patterns in LIBRARY_SIGNATURES:
        usage = _count(patterns, text)
        if usage > 0:
            found.append(LibraryUsage(
                name=name,
                confidence=confidence,
                matched_pattern_ids=[p.pattern for p in patterns],
                usage_count=usage,
            ))
    return found


def _mean(values: list[int]) -> int:
    return _round_half_up(sum(values) / len(values)) if values else 0


def _metrics(
    lines: list[str],
    functions: list[FunctionInfo],
    classes: list[ClassInfo],
    imports: list[ImportInfo],
    exports: list[ExportInfo],
) -> CodeMetrics:
    code = comment = empty = 0
    for line in lines:
        s = line.strip()
        if not s:
            empty += 1
        elif s.startswith("//") or s.startswith("/*"):
            comment += 1
        else:
            code += 1
    return CodeMetrics(
        total_lines=len(lines),
        code_lines=code,
        comment_lines=comment,
        empty_lines=empty,
        function_count=len(functions),
        class_count=len(classes),
        import_count=len(imports),
        export_count=len(exports),
        average_function_size=_mean([f.size_chars for f in functions]),
        average_class_size=_mean([c.size_chars for c in classes]),
        cyclomatic_complexity=sum(f.complexity for f in functions),
    )


def _opportunities(
    functions: list[FunctionInfo],
    classes: list[ClassInfo],
    imports: list[ImportInfo],
    libraries: list[LibraryUsage],
    metrics: CodeMetrics,
) -> list[str]:
    out: list[str] = []
    large_functions = [f for f in functions if f.size_chars > LARGE_FUNCTION_CHARS]
    if large_functions:
        out.append(
            f"{len(large_functions)} large functions detected. "
            "Consider breaking them down for better maintainability."
        )
    large_classes = [c for c in classes if c.size_chars > LARGE_CLASS_CHARS]
    if large_classes:
        out.append(
            f"{len(large_classes)} large classes detected. "
            "Consider splitting into smaller, focused classes."
        )
    if len(imports) > MANY_IMPORTS:
        out.append("High number of imports detected. Consider bundling or using barrel exports.")
    for lib in libraries:
        if lib.usage_count > HEAVY_LIBRARY_USAGE:
            out.append(f"Heavy usage of {lib.name} detected. Consider code splitting or lazy loading.")
    if metrics.cyclomatic_complexity > HIGH_COMPLEXITY:
        out.append("High cyclomatic complexity detected. Consider simplifying control flow.")
    return out


def analyze(source_text: str) -> JavaScriptAnalysis:
    """Recover approximate structure from one JavaScript file's text.

    Every extraction is an independent regex pass over the raw text; nothing
    is tokenized, so matches inside strings and comments count too.
    """
    text = source_text or ""
    lines = text.split("\n")

    file_type, confidence = classify_file_type(text)
    functions = _extract_functions(text, lines)
    classes = _extract_classes(text, lines)
    imports = _extract_imports(text)
    exports = _extract_exports(text)
    libraries = detect_libraries(text)
    metrics = _metrics(lines, functions, classes, imports, exports)

    return JavaScriptAnalysis(
        file_type=file_type,
        confidence=confidence,
        functions=functions,
        classes=classes,
        imports=imports,
        exports=exports,
        dependencies=[imp.source for imp in imports],
        libraries=libraries,
        code_metrics=metrics,
        optimization_opportunities=_opportunities(functions, classes, imports, libraries, metrics),
        insights=[],
    )
