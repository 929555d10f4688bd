"""Tests for the bundle insight rules.

Covers: composition and compression insights, module-count tiers, the
single performance-tier insight and its priority, asset diversity, large
dependencies, large chunks, tree shaking, duplicate names and id
uniqueness.
"""

import pytest

from conftest import make_chunk, make_module

from bundlescope.analysis.detectors.duplication import detect_duplicates, duplicate_occurrences
from bundlescope.analysis.detectors.performance import detect_performance_tier
from bundlescope.analysis.insight import OptimizationInsight, dedupe_ids, large_dependency_fix
from bundlescope.analysis.rules import generate_insights

KIB = 1024
MIB = 1024 * 1024

TIER_IDS = {
    "slow-3g-load",
    "poor-compression",
    "large-bundle-performance",
    "medium-bundle-performance",
    "good-bundle-size",
}


def _ids(insights):
    return [i.id for i in insights]


# ── Performance tier ──


class TestPerformanceTier:
    def test_poor_compression_beats_size_tier(self):
        ratio = (400_000 - 350_000) / 400_000 * 100
        insights = detect_performance_tier(400_000, ratio)
        assert _ids(insights) == ["poor-compression"]
        assert "12.5%" in insights[0].description

    def test_slow_3g_beats_poor_compression(self):
        insights = detect_performance_tier(2 * MIB, 5.0)
        assert _ids(insights) == ["slow-3g-load"]
        assert insights[0].impact == "high"

    def test_moderate_size(self):
        assert _ids(detect_performance_tier(600_000, 70.0)) == ["medium-bundle-performance"]

    def test_small_bundle(self):
        insights = detect_performance_tier(50 * KIB, 70.0)
        assert _ids(insights) == ["good-bundle-size"]
        assert "50 KB" in insights[0].description

    def test_no_ratio_skips_compression_check(self):
        assert _ids(detect_performance_tier(0, None)) == ["good-bundle-size"]

    def test_exactly_one_tier_from_rules(self):
        modules = [make_module("app.js", size=400_000, gzip_size=350_000)]
        ids = _ids(generate_insights(modules, []))
        assert [i for i in ids if i in TIER_IDS] == ["poor-compression"]
        assert "compression-efficiency" in ids


# ── Composition and structure ──


class TestComposition:
    def test_composition_counts(self):
        modules = [
            make_module("a.js"), make_module("b.js"),
            make_module("c.css", type="css"), make_module("d.json", type="json"),
        ]
        insights = generate_insights(modules, [])
        composition = next(i for i in insights if i.id == "bundle-composition")
        assert composition.description == (
            "Your bundle contains 2 JavaScript modules, 1 CSS modules, and 1 other assets."
        )
        diversity = next(i for i in insights if i.id == "file-type-diversity")
        assert "3 different file types: js, css, json" in diversity.description

    def test_no_composition_without_js(self):
        ids = _ids(generate_insights([make_module("a.css", type="css")], []))
        assert "bundle-composition" not in ids
        assert "module-count-low" in ids

    def test_well_modularized(self):
        modules = [make_module(f"m{i}.js") for i in range(11)]
        ids = _ids(generate_insights(modules, []))
        assert "module-count" in ids
        assert "module-count-low" not in ids

    def test_middle_module_count_is_silent(self):
        modules = [make_module(f"m{i}.js") for i in range(8)]
        ids = _ids(generate_insights(modules, []))
        assert "module-count" not in ids and "module-count-low" not in ids

    def test_tree_shaking_over_fifty_js_modules(self):
        modules = [make_module(f"m{i}.js", size=10) for i in range(51)]
        insight = next(i for i in generate_insights(modules, []) if i.id == "tree-shaking")
        assert insight.category == "tree-shaking"
        assert "51 JavaScript modules" in insight.description


# ── Large modules and chunks ──


class TestLargeModulesAndChunks:
    def test_large_dependencies_sorted_by_size(self):
        modules = [
            make_module("node_modules/lodash/lodash.js", size=200 * KIB, id="lodash"),
            make_module("node_modules/moment/moment.js", size=600 * KIB, id="moment"),
            make_module("src/small.js", size=10 * KIB, id="small"),
        ]
        deps = [i for i in generate_insights(modules, []) if i.category == "dependency"]
        assert _ids(deps) == ["large-dep-moment", "large-dep-lodash"]
        assert [i.impact for i in deps] == ["high", "medium"]
        assert deps[0].estimated_savings_bytes == pytest.approx(600 * KIB * 0.3)
        assert "dayjs" in deps[0].recommendation
        assert "lodash-es" in deps[1].recommendation

    def test_large_chunk(self):
        chunks = [make_chunk("main", size=300 * KIB), make_chunk("small", size=10 * KIB)]
        splits = [i for i in generate_insights([], chunks) if i.id.startswith("code-split-")]
        assert _ids(splits) == ["code-split-main"]
        assert splits[0].estimated_savings_bytes == pytest.approx(300 * KIB * 0.4)

    def test_generic_dependency_fix(self):
        assert large_dependency_fix("three.js").startswith("Analyze if this dependency is necessary")


# ── Duplicates and ids ──


class TestDuplicates:
    def test_two_utils_modules_give_one_insight(self):
        modules = [make_module("utils.js", id="a"), make_module("utils.js", id="b")]
        dups = [i for i in generate_insights(modules, []) if i.category == "duplicates"]
        assert len(dups) == 1
        assert dups[0].description.startswith("Found 1 duplicate module names")

    def test_occurrences_beyond_first(self):
        modules = [make_module("a.js")] * 3 + [make_module("b.js")] * 2 + [make_module("c.js")]
        assert duplicate_occurrences(modules) == 3

    def test_no_duplicates(self):
        assert detect_duplicates([make_module("a.js"), make_module("b.js")]) == []

    def test_repeated_ids_are_suffixed(self):
        modules = [make_module("x.js", size=200 * KIB, id="x"), make_module("y.js", size=150 * KIB, id="x")]
        ids = _ids(generate_insights(modules, []))
        assert "large-dep-x" in ids and "large-dep-x-2" in ids
        assert len(ids) == len(set(ids))

    def test_dedupe_ids_keeps_order(self):
        base = OptimizationInsight(
            id="dup", kind="info", title="t", description="d",
            impact="low", recommendation="r", category="performance",
        )
        assert _ids(dedupe_ids([base, base, base])) == ["dup", "dup-2", "dup-3"]
