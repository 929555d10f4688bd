from __future__ import annotations
from dataclasses import dataclass, field
from itertools import islice
from pathlib import Path
from typing import Dict, Iterable, List, Tuple
import json
import networkx as nx

from bundlescope.ingestion.model import Module

TOP_N = 10
MAX_CYCLES = 10
MAX_CYCLE_LEN = 8

@dataclass(frozen=True)
class ModuleEdge:
    importer: str
    specifier: str

@dataclass
class DepMetrics:
    fan_in: Dict[str, int]
    fan_out: Dict[str, int]
    cycles: List[List[str]]
    top_fan_in: List[Tuple[str, int]]
    top_fan_out: List[Tuple[str, int]]
    unresolved: List[str] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            "fan_in": self.fan_in,
            "fan_out": self.fan_out,
            "cycles": self.cycles,
            "top_fan_in": self.top_fan_in,
            "top_fan_out": self.top_fan_out,
            "unresolved": self.unresolved,
        }

def module_edges(modules: Iterable[Module]) -> list[ModuleEdge]:
    return [ModuleEdge(importer=m.name, specifier=dep) for m in modules for dep in m.dependencies]

def _ranked(degrees: Dict[str, int]) -> List[Tuple[str, int]]:
    return sorted(degrees.items(), key=lambda kv: kv[1], reverse=True)[:TOP_N]

def build_dep_graph(modules: Iterable[Module]) -> tuple[nx.DiGraph, DepMetrics]:
    """Importer name -> dependency specifier graph; repeated edges collapse.

    Specifiers that name no module in the bundle stay as bare nodes and are
    listed as unresolved.
    """
    modules = list(modules)
    G = nx.DiGraph()
    for m in modules:
        G.add_node(m.name, size=m.size, type=m.type, external=m.is_external)
    for edge in module_edges(modules):
        importer, specifier = edge.importer.strip(), str(edge.specifier).strip()
        if not importer or not specifier or importer == specifier:
            continue
        if specifier not in G:
            G.add_node(specifier, type="specifier")
        G.add_edge(importer, specifier)

    fan_in = {n: G.in_degree(n) for n in G.nodes}
    fan_out = {n: G.out_degree(n) for n in G.nodes}
    cycles = [c[:MAX_CYCLE_LEN] for c in islice(nx.simple_cycles(G), MAX_CYCLES)]
    unresolved = [n for n, kind in G.nodes(data="type") if kind == "specifier"]
    return G, DepMetrics(
        fan_in=fan_in,
        fan_out=fan_out,
        cycles=cycles,
        top_fan_in=_ranked(fan_in),
        top_fan_out=_ranked(fan_out),
        unresolved=unresolved,
    )

def write_dep_json(G: nx.DiGraph, path: Path) -> Path:
    payload = {
        "nodes": [{"id": n, **attrs} for n, attrs in G.nodes(data=True)],
        "edges": [{"source": u, "target": v} for u, v in G.edges],
    }
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return path
