from __future__ import annotations
from pathlib import Path
import os
from typing import Iterable, Optional

import pathspec
from loguru import logger

from bundlescope.core.errors import IngestLimitError
from bundlescope.ingestion.sources import LocalFile

HARD_EXCLUDE_DIRS = {
    ".git", ".hg", ".svn",
    ".venv", "venv", "env",
    "__pycache__",
    "node_modules",
    ".idea", ".vscode",
    ".cache", ".pytest_cache",
}

def normalize_extensions(extensions: Iterable[str]) -> set[str]:
    out: set[str] = set()
    for ext in extensions:
        ext = str(ext).strip().lower()
        if ext:
            out.add(ext if ext.startswith(".") else f".{ext}")
    return out

def _compile_excludes(patterns: list[str]) -> Optional[pathspec.PathSpec]:
    if not patterns:
        return None
    return pathspec.GitIgnoreSpec.from_lines(patterns)

def _walk_dir(root: Path, allowed: set[str], spec: Optional[pathspec.PathSpec]) -> list[Path]:
    found: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dir_rel = Path(dirpath).relative_to(root)
        kept = []
        for d in sorted(dirnames):
            if d in HARD_EXCLUDE_DIRS:
                continue
            if spec and spec.match_file((dir_rel / d).as_posix() + "/"):
                continue
            kept.append(d)
        dirnames[:] = kept
        for fname in filenames:
            rel = dir_rel / fname
            if Path(fname).suffix.lower() not in allowed:
                continue
            if spec and spec.match_file(rel.as_posix()):
                continue
            found.append(root / rel)
    return sorted(found, key=lambda p: p.relative_to(root).as_posix())

def collect_files(
    paths: Iterable[Path],
    extensions: Iterable[str],
    exclude: list[str] | None = None,
    max_total_bytes: int | None = None,
) -> list[LocalFile]:
    """Expand files and directories into descriptors, validated the way an upload form would.

    Explicitly named files must carry an allowed extension; directory contents
    with other extensions are silently skipped.
    """
    allowed = normalize_extensions(extensions)
    spec = _compile_excludes(list(exclude or []))
    results: list[LocalFile] = []

    for raw in paths:
        p = Path(raw)
        if p.is_dir():
            for f in _walk_dir(p, allowed, spec):
                results.append(LocalFile.from_path(f))
        elif p.is_file():
            if p.suffix.lower() not in allowed:
                raise IngestLimitError(
                    f"{p.name}: unsupported file type; allowed: {', '.join(sorted(allowed))}"
                )
            results.append(LocalFile.from_path(p))
        else:
            raise IngestLimitError(f"Path not found: {p}")

    total = sum(f.size_bytes for f in results)
    if max_total_bytes and total > max_total_bytes:
        raise IngestLimitError(
            f"Total file size {total} bytes exceeds the {max_total_bytes} byte limit"
        )
    logger.debug(f"Collected {len(results)} file(s), {total} bytes")
    return results
