"""Shared test fixtures for bundlescope tests."""

import json
import sys
from pathlib import Path

import pytest

# Repo root holds the bundlescope package (flat layout)
sys.path.insert(0, str(Path(__file__).parent.parent))

from bundlescope.ingestion.model import Chunk, Module
from bundlescope.ingestion.sources import InMemoryFile


def make_module(
    name: str = "src/index.js",
    size: float = 1000,
    type: str = "js",
    gzip_size=None,
    dependencies=None,
    is_external: bool = False,
    id: str = "",
    chunk_id=None,
) -> Module:
    return Module(
        id=id or f"m-{name}",
        name=name,
        size=size,
        path=name.split("/"),
        type=type,
        gzip_size=gzip_size,
        dependencies=list(dependencies or []),
        is_external=is_external,
        chunk_id=chunk_id,
    )


def make_chunk(id: str = "main", size: float = 1000, module_ids=None, is_entry: bool = False) -> Chunk:
    return Chunk(
        id=id,
        name=id,
        size=size,
        gzip_size=size * 0.3,
        module_ids=list(module_ids or []),
        is_entry=is_entry,
    )


# ── Fixtures ──


@pytest.fixture
def stats_file():
    """A webpack stats export with three modules, one of them external."""
    data = {
        "modules": [
            {
                "id": 1,
                "name": "./src/index.js",
                "size": 4000,
                "gzipSize": 1200,
                "chunks": ["main"],
                "dependencies": [{"moduleName": "./src/app.js"}, "react"],
            },
            {
                "id": 2,
                "name": "./src/app.js",
                "size": 6000,
                "chunks": [{"id": "main"}],
                "dependencies": ["./src/index.js"],
            },
            {
                "id": 3,
                "name": "./node_modules/react/index.js",
                "size": 10000,
                "external": True,
            },
        ]
    }
    return InMemoryFile(name="stats.json", text=json.dumps(data))


@pytest.fixture
def source_map_file():
    data = {"version": 3, "sources": ["src/a.js", "src/styles.css", 7, "lib/util.js"]}
    return InMemoryFile(name="app.js.map", text=json.dumps(data))


@pytest.fixture
def plain_js_file():
    return InMemoryFile(
        name="add.js",
        text="import { sum } from './math';\nfunction add(a, b) {\nreturn a + b;\n}\n",
    )
