"""Tests for the performance scorer.

Covers: load-time estimates per network profile, the penalty table and the
multi-chunk bonus, score bounds and labels, the critical-path heuristic and
recommendations.
"""

import pytest

from conftest import make_chunk, make_module

from bundlescope.analysis.scoring import (
    ALWAYS_RECOMMENDED,
    critical_path,
    estimate_load_times,
    performance_score,
    score,
    score_label,
)
from bundlescope.ingestion.model import BundleAggregate, BundleMetadata

KIB = 1024
MIB = 1024 * 1024


def make_bundle(modules, chunks=(), total_size=None, total_gzip_size=None):
    total = sum(m.size for m in modules) if total_size is None else total_size
    gzip = sum(m.effective_gzip_size for m in modules) if total_gzip_size is None else total_gzip_size
    return BundleAggregate(
        total_size=total,
        total_gzip_size=gzip,
        modules=list(modules),
        chunks=list(chunks),
        insights=[],
        metadata=BundleMetadata(analyzed_at="2024-01-01T00:00:00.000Z", file_count=1, file_types=["json"]),
    )


# ── Load times ──


class TestLoadTimes:
    def test_one_mebibyte(self):
        est = estimate_load_times(MIB)
        assert est.fast_3g == pytest.approx(5.0)
        assert est.slow_3g == pytest.approx(MIB * 8 / (780 * KIB))
        assert est.fast_4g == pytest.approx(8 / 9)
        assert est.wifi == pytest.approx(8 / 30)

    def test_empty(self):
        est = estimate_load_times(0)
        assert (est.fast_3g, est.slow_3g, est.fast_4g, est.wifi) == (0, 0, 0, 0)


# ── Score ──


class TestScore:
    def test_documented_example_scores_45(self):
        modules = [make_module(f"m{i}.js", size=1, is_external=i < 35) for i in range(250)]
        bundle = make_bundle(modules, [make_chunk("main")], total_size=1_572_864, total_gzip_size=400_000)
        assert performance_score(bundle) == 45
        assert score_label(45) == "Poor"

    def test_documented_example_with_estimated_gzip_scores_45(self):
        modules = [make_module(f"m{i}.js", size=1_572_864 / 250, is_external=i < 35) for i in range(250)]
        bundle = make_bundle(modules, [make_chunk("main")])
        assert bundle.total_gzip_size / bundle.total_size == pytest.approx(0.3)
        assert performance_score(bundle) == 45

    @pytest.mark.parametrize("sizes", [
        [10 * KIB],
        [0.1, 0.2, 0.7],
        [1_000 / 3] * 7,
        [6291.456] * 13,
    ])
    def test_estimated_gzip_gets_no_compression_penalty(self, sizes):
        modules = [make_module(f"m{i}.js", size=s) for i, s in enumerate(sizes)]
        assert performance_score(make_bundle(modules)) == 100

    def test_compression_penalties(self):
        modules = [make_module("a.js", size=100 * KIB)]
        assert performance_score(make_bundle(modules, total_gzip_size=50 * KIB)) == 85
        assert performance_score(make_bundle(modules, total_gzip_size=35 * KIB)) == 95
        assert performance_score(make_bundle(modules, total_gzip_size=30 * KIB)) == 100

    def test_multi_chunk_bonus_is_clamped(self):
        chunks = [make_chunk("a"), make_chunk("b")]
        bundle = make_bundle([make_module("a.js", size=10 * KIB)], chunks)
        assert performance_score(bundle) == 100

    @pytest.mark.parametrize("n_modules, size, externals, n_chunks", [
        (0, 0, 0, 0),
        (1, 10, 0, 5),
        (500, 50 * MIB, 500, 1),
        (1000, 10 * 1024 * MIB, 1000, 0),
    ])
    def test_score_is_bounded(self, n_modules, size, externals, n_chunks):
        modules = [
            make_module(f"m{i}.js", size=size / max(n_modules, 1), is_external=i < externals)
            for i in range(n_modules)
        ]
        chunks = [make_chunk(f"c{i}") for i in range(n_chunks)]
        value = score(make_bundle(modules, chunks, total_gzip_size=size * 0.9)).performance_score
        assert isinstance(value, int)
        assert 0 <= value <= 100

    @pytest.mark.parametrize("value, label", [
        (100, "Excellent"), (90, "Excellent"), (89, "Good"), (70, "Good"),
        (69, "Needs Improvement"), (50, "Needs Improvement"), (49, "Poor"), (0, "Poor"),
    ])
    def test_labels(self, value, label):
        assert score_label(value) == label


# ── Critical path and recommendations ──


class TestCriticalPath:
    def test_blocking_modules(self):
        modules = [
            make_module("big.js", size=500),
            make_module("mid.js", size=300),
            make_module("low.js", size=150),
            make_module("tiny.js", size=50),
        ]
        cp = critical_path(make_bundle(modules, [make_chunk("main")]))
        assert [m.name for m in cp.blocking_modules] == ["big.js", "mid.js", "low.js"]
        assert cp.total_blocking_time_ms == pytest.approx(950 / 1024 * 0.1)
        assert 'Large module "big.js" - consider splitting' in cp.opportunities
        assert 'Large module "mid.js" - consider splitting' in cp.opportunities
        assert 'Large module "low.js" - consider splitting' not in cp.opportunities
        assert cp.opportunities[-1] == "Single chunk detected - implement code splitting"

    def test_at_most_five_blocking_modules(self):
        modules = [make_module(f"m{i}.js", size=100) for i in range(6)]
        cp = critical_path(make_bundle(modules))
        assert len(cp.blocking_modules) == 5

    def test_size_opportunities(self):
        cp = critical_path(make_bundle([make_module(f"m{i}.js", size=MIB // 10) for i in range(12)]))
        assert "Bundle size exceeds 500KB - consider code splitting" in cp.opportunities
        assert "Bundle size exceeds 1MB - implement aggressive code splitting" in cp.opportunities


class TestRecommendations:
    def test_always_present(self):
        report = score(make_bundle([]))
        assert report.recommendations == list(ALWAYS_RECOMMENDED)

    def test_large_single_chunk_bundle(self):
        bundle = make_bundle([make_module("a.js", size=2 * MIB)], [make_chunk("main")])
        recs = score(bundle).recommendations
        assert recs[:2] == [
            "Implement aggressive code splitting to reduce bundle size",
            "Consider lazy loading for non-critical components",
        ]
        assert "Implement route-based code splitting" in recs
        assert recs[-2:] == list(ALWAYS_RECOMMENDED)
