from __future__ import annotations
import math
from dataclasses import dataclass, field
from typing import Mapping

from bundlescope.ingestion.model import BundleAggregate, Module

KIB = 1024
MIB = 1024 * 1024

# bits per second
NETWORK_PROFILES: Mapping[str, float] = {
    "fast_3g": 1.6 * MIB,
    "slow_3g": 780 * KIB,
    "fast_4g": 9 * MIB,
    "wifi": 30 * MIB,
}

BLOCKING_SHARE = 0.1
MAX_BLOCKING_MODULES = 5
PARSE_MS_PER_KIB = 0.1

ALWAYS_RECOMMENDED = (
    "Monitor Core Web Vitals in production",
    "Set up performance budgets for bundle size",
)

@dataclass(frozen=True)
class LoadTimeEstimates:
    fast_3g: float
    slow_3g: float
    fast_4g: float
    wifi: float

@dataclass(frozen=True)
class CriticalPath:
    blocking_modules: list[Module]
    total_blocking_time_ms: float
    opportunities: list[str] = field(default_factory=list)

@dataclass(frozen=True)
class PerformanceReport:
    load_time_estimates: LoadTimeEstimates
    critical_path: CriticalPath
    performance_score: int
    score_label: str
    recommendations: list[str]


def load_time_seconds(total_size: float, bits_per_second: float) -> float:
    return total_size * 8 / bits_per_second

def estimate_load_times(total_size: float) -> LoadTimeEstimates:
    return LoadTimeEstimates(**{k: load_time_seconds(total_size, bps) for k, bps in NETWORK_PROFILES.items()})

def _externals(modules: list[Module]) -> int:
    return sum(1 for m in modules if m.is_external)

def _critical_path_opportunities(bundle: BundleAggregate, blocking: list[Module]) -> list[str]:
    total = bundle.total_size
    out: list[str] = []
    if total > 500 * KIB:
        out.append("Bundle size exceeds 500KB - consider code splitting")
    if total > MIB:
        out.append("Bundle size exceeds 1MB - implement aggressive code splitting")
    if sum(1 for m in bundle.modules if m.type == "js") > 100:
        out.append("High module count - consider bundling strategies")
    if sum(1 for m in bundle.modules if m.type == "css") > 10:
        out.append("Multiple CSS files - consider CSS bundling")
    if _externals(bundle.modules) > 20:
        out.append("Many external dependencies - review necessity")
    for m in blocking:
        if m.size > total * 0.2:
            out.append(f'Large module "{m.name}" - consider splitting')
    if len(bundle.chunks) == 1:
        out.append("Single chunk detected - implement code splitting")
    return out

def critical_path(bundle: BundleAggregate) -> CriticalPath:
    total = bundle.total_size
    blocking = sorted(
        (m for m in bundle.modules if m.size > total * BLOCKING_SHARE),
        key=lambda m: m.size,
        reverse=True,
    )[:MAX_BLOCKING_MODULES]
    blocking_ms = sum(m.size / KIB * PARSE_MS_PER_KIB for m in blocking)
    return CriticalPath(
        blocking_modules=blocking,
        total_blocking_time_ms=blocking_ms,
        opportunities=_critical_path_opportunities(bundle, blocking),
    )

def _exceeds(ratio: float, limit: float) -> bool:
    # estimated gzip sizes sit exactly on 0.3 up to float noise
    return ratio > limit and not math.isclose(ratio, limit)

def performance_score(bundle: BundleAggregate) -> int:
    total = bundle.total_size
    gzip = bundle.total_gzip_size
    n_modules = len(bundle.modules)
    score = 100

    if total > MIB:
        score -= 30
    elif total > 500 * KIB:
        score -= 20
    elif total > 250 * KIB:
        score -= 10

    if gzip and total > 0:
        ratio = gzip / total
        if _exceeds(ratio, 0.4):
            score -= 15
        elif _exceeds(ratio, 0.3):
            score -= 5

    if n_modules > 200:
        score -= 15
    elif n_modules > 100:
        score -= 10
    elif n_modules > 50:
        score -= 5

    externals = _externals(bundle.modules)
    if externals > 30:
        score -= 10
    elif externals > 20:
        score -= 5

    if len(bundle.chunks) > 1:
        score += 10

    return max(0, min(100, int(math.floor(score + 0.5))))

def score_label(score: int) -> str:
    if score >= 90:
        return "Excellent"
    if score >= 70:
        return "Good"
    if score >= 50:
        return "Needs Improvement"
    return "Poor"

def recommendations(bundle: BundleAggregate) -> list[str]:
    total = bundle.total_size
    out: list[str] = []
    if total > MIB:
        out.append("Implement aggressive code splitting to reduce bundle size")
        out.append("Consider lazy loading for non-critical components")
    elif total > 500 * KIB:
        out.append("Implement code splitting for better performance")
        out.append("Review and remove unused dependencies")
    if len(bundle.modules) > 100:
        out.append("Consolidate small modules to reduce HTTP requests")
        out.append("Use tree shaking to eliminate dead code")
    if _externals(bundle.modules) > 20:
        out.append("Audit external dependencies for necessity")
        out.append("Consider bundling frequently used external libraries")
    if len(bundle.chunks) == 1:
        out.append("Split vendor and application code into separate chunks")
        out.append("Implement route-based code splitting")
    out.extend(ALWAYS_RECOMMENDED)
    return out

def score(bundle: BundleAggregate) -> PerformanceReport:
    """Estimate load behaviour of an aggregate; pure function of its input."""
    value = performance_score(bundle)
    return PerformanceReport(
        load_time_estimates=estimate_load_times(bundle.total_size),
        critical_path=critical_path(bundle),
        performance_score=value,
        score_label=score_label(value),
        recommendations=recommendations(bundle),
    )
