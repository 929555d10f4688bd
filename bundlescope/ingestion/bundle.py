from __future__ import annotations
import asyncio
import json
import math
import re
import typing as t
from dataclasses import dataclass, field
from datetime import datetime, timezone

from loguru import logger

from bundlescope.analysis.rules import generate_insights
from bundlescope.ingestion.model import (
    GZIP_ESTIMATE_RATIO,
    BundleAggregate,
    BundleMetadata,
    Chunk,
    Module,
    ModuleType,
    total_gzip_size_of,
    total_size_of,
)
from bundlescope.ingestion.sources import SourceFile
from bundlescope.parsing.js_analyzer import analyze

COMPILED_BUNDLE_MARKERS = ("webpack_require", "__webpack_require__", "webpackJsonp", "webpackChunk")

_MODULE_REFERENCE_RES = (
    re.compile(r"""webpack_require\(['"`]([^'"`]+)['"`]\)"""),
    re.compile(r"""__webpack_require__\(['"`]([^'"`]+)['"`]\)"""),
    re.compile(r"webpack_require\((\d+)\)"),
    re.compile(r"__webpack_require__\((\d+)\)"),
)

# Placeholder split for bundles without recoverable module names.
ESTIMATED_BREAKDOWN: tuple[tuple[str, float], ...] = (
    ("React Core", 0.15),
    ("React DOM", 0.12),
    ("Application Code", 0.25),
    ("Dependencies", 0.35),
    ("Runtime", 0.13),
)

SOURCE_MAP_BYTES_PER_CHAR = 2

_TYPE_BY_EXTENSION: dict[str, ModuleType] = {
    "js": "js", "jsx": "js", "ts": "js", "tsx": "js",
    "css": "css", "scss": "css", "sass": "css", "less": "css",
    "json": "json",
    "map": "map",
}


@dataclass
class _FileResult:
    modules: list[Module] = field(default_factory=list)
    chunks: list[Chunk] = field(default_factory=list)


def _extension(name: str) -> str:
    return (name or "").split(".")[-1].lower()

def module_type_for(name: t.Optional[str]) -> ModuleType:
    if not name:
        return "other"
    return _TYPE_BY_EXTENSION.get(_extension(name), "other")

def module_path_for(name: t.Optional[str]) -> list[str]:
    if not name:
        return ["unknown"]
    if "node_modules" in name:
        parts = name.split("node_modules/")
        if len(parts) > 1:
            return ["node_modules", *parts[1].split("/")]
    return name.split("/")

def _dependency_names(raw: t.Any) -> list[str]:
    """Stats files list dependencies as strings or as reason objects."""
    names: list[str] = []
    for dep in raw or []:
        if isinstance(dep, str):
            names.append(dep)
        elif isinstance(dep, dict):
            name = dep.get("moduleName") or dep.get("userRequest") or dep.get("module")
            if name:
                names.append(str(name))
    return names

def _module_refs(raw: t.Any) -> list[str]:
    refs: list[str] = []
    for ref in raw or []:
        if isinstance(ref, dict):
            ref = ref.get("id", ref.get("name"))
        if ref is not None:
            refs.append(str(ref))
    return refs


# ====== .json ======

def _number(entry: dict, key: str, where: str) -> t.Optional[float]:
    """Numeric field of a stats entry; a present non-number fails the whole file."""
    value = entry.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{where}: {key} must be a number, got {value!r}")
    return value

def _stats_modules(entries: list) -> list[Module]:
    modules: list[Module] = []
    for i, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ValueError(f"stats module #{i} is not an object")
        label = entry.get("name") or entry.get("identifier")
        chunk_refs = _module_refs(entry.get("chunks"))
        modules.append(Module(
            id=str(entry.get("id") or f"module-{i}"),
            name=str(label or f"Module {i}"),
            size=_number(entry, "size", f"stats module #{i}") or 0,
            gzip_size=_number(entry, "gzipSize", f"stats module #{i}"),
            path=module_path_for(label),
            dependencies=_dependency_names(entry.get("dependencies")),
            is_external=bool(entry.get("external") or False),
            type=module_type_for(label),
            chunk_id=chunk_refs[0] if chunk_refs else None,
        ))
    return modules

def _stats_chunks(entries: list) -> list[Chunk]:
    chunks: list[Chunk] = []
    for i, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ValueError(f"stats chunk #{i} is not an object")
        size = _number(entry, "size", f"stats chunk #{i}") or 0
        chunks.append(Chunk(
            id=str(entry.get("id") or f"chunk-{i}"),
            name=str(entry.get("name") or f"Chunk {i}"),
            size=size,
            gzip_size=_number(entry, "gzipSize", f"stats chunk #{i}") or size * GZIP_ESTIMATE_RATIO,
            module_ids=_module_refs(entry.get("modules")),
            is_entry=bool(entry.get("entry") or False),
        ))
    return chunks

def parse_stats(text: str) -> _FileResult:
    data = json.loads(text)
    result = _FileResult()
    if not isinstance(data, dict):
        logger.debug("JSON root is not an object; nothing to extract")
        return result
    if isinstance(data.get("modules"), list):
        result.modules = _stats_modules(data["modules"])
    elif isinstance(data.get("chunks"), list):
        result.chunks = _stats_chunks(data["chunks"])
    return result


# ====== .map ======

def parse_source_map(text: str) -> _FileResult:
    data = json.loads(text)
    result = _FileResult()
    sources = data.get("sources") if isinstance(data, dict) else None
    if not isinstance(sources, list):
        return result
    for i, source in enumerate(sources):
        if not isinstance(source, str):
            logger.debug(f"Skipping non-string source map entry #{i}")
            continue
        result.modules.append(Module(
            id=f"sourcemap-{i}",
            name=source,
            size=len(source) * SOURCE_MAP_BYTES_PER_CHAR,
            path=source.split("/"),
            type=module_type_for(source),
        ))
    return result


# ====== .js ======

def is_compiled_bundle(text: str) -> bool:
    return any(marker in text for marker in COMPILED_BUNDLE_MARKERS)

def referenced_module_names(text: str) -> list[str]:
    """Distinct string-literal require targets in first-seen order.

    Numeric targets carry no name and are dropped.
    """
    names: dict[str, None] = {}
    for pattern in _MODULE_REFERENCE_RES:
        for m in pattern.finditer(text):
            target = m.group(1)
            if target and not target.isdigit():
                names.setdefault(target, None)
    return list(names)

def estimate_bundle_modules(text: str) -> list[Module]:
    total = len(text)
    return [
        Module(
            id=f"estimated-{i}",
            name=name,
            size=math.floor(total * ratio),
            path=[name],
            type="js",
        )
        for i, (name, ratio) in enumerate(ESTIMATED_BREAKDOWN)
    ]

def parse_compiled_bundle(text: str, filename: str) -> _FileResult:
    result = _FileResult()
    names = referenced_module_names(text)
    if not names:
        logger.debug(f"{filename}: no named module references, using estimated breakdown")
        result.modules = estimate_bundle_modules(text)
        return result

    share = math.floor(len(text) / len(names))
    result.modules = [
        Module(
            id=f"compiled-{i}",
            name=name,
            size=share,
            path=name.split("/"),
            type=module_type_for(name),
            chunk_id="main-bundle",
        )
        for i, name in enumerate(names)
    ]
    result.chunks = [Chunk(
        id="main-bundle",
        name=filename,
        size=len(text),
        gzip_size=math.floor(len(text) * GZIP_ESTIMATE_RATIO),
        module_ids=[m.id for m in result.modules],
        is_entry=True,
    )]
    return result

def parse_javascript(text: str, file: SourceFile) -> _FileResult:
    if is_compiled_bundle(text):
        logger.debug(f"{file.name}: compiled bundle markers found")
        return parse_compiled_bundle(text, file.name)
    js = analyze(text)
    return _FileResult(modules=[Module(
        id=f"js-{file.name}",
        name=file.name,
        size=file.size_bytes,
        path=[file.name],
        dependencies=list(js.dependencies),
        type="js",
        javascript_analysis=js,
    )])


async def process_file(file: SourceFile) -> _FileResult:
    ext = _extension(file.name)
    if ext == "json":
        return parse_stats(await file.read_text())
    if ext == "map":
        return parse_source_map(await file.read_text())
    if ext == "js":
        return parse_javascript(await file.read_text(), file)
    logger.debug(f"{file.name}: unsupported extension {ext!r}, no modules extracted")
    return _FileResult()


def _file_type_label(name: str) -> str:
    return name.split(".")[-1] or "unknown"


async def ingest(files: t.Sequence[SourceFile]) -> BundleAggregate:
    """Turn build artifacts into one aggregate, in input order.

    A file that cannot be read or parsed is logged and skipped as a whole.
    """
    modules: list[Module] = []
    chunks: list[Chunk] = []
    logger.info(f"Ingesting {len(files)} file(s)")

    for file in files:
        try:
            result = await process_file(file)
        except Exception as e:
            logger.warning(f"Skipping {file.name}: {type(e).__name__}: {e}")
            continue
        modules.extend(result.modules)
        chunks.extend(result.chunks)

    logger.info(f"Extracted {len(modules)} module(s) and {len(chunks)} chunk(s)")

    return BundleAggregate(
        total_size=total_size_of(modules),
        total_gzip_size=total_gzip_size_of(modules),
        modules=modules,
        chunks=chunks,
        insights=generate_insights(modules, chunks),
        metadata=BundleMetadata(
            analyzed_at=datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            file_count=len(files),
            file_types=[_file_type_label(f.name) for f in files],
        ),
    )


def ingest_files(files: t.Sequence[SourceFile]) -> BundleAggregate:
    return asyncio.run(ingest(files))
