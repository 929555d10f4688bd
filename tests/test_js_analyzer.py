"""Tests for the regex-based JavaScript analyzer.

Covers: file-type classification (including unclamped confidence), function
extraction across the three declaration passes, the line-based block-end
heuristic, class member mining, ES6/CommonJS/dynamic imports, exports,
library signatures, line metrics, optimization opportunities and
idempotence.
"""

import textwrap

import pytest

from bundlescope.parsing.js_analyzer import (
    analyze,
    classify_file_type,
    complexity_of,
    detect_libraries,
)


# ── Classification ──


class TestClassifyFileType:
    def test_es_module(self):
        file_type, confidence = classify_file_type("import x from 'y'; export const z = 1;")
        assert file_type == "module"
        assert confidence == 6

    def test_webpack_markers_classify_as_bundle(self):
        text = "(function(modules){ __webpack_require__(0); })([])"
        file_type, _ = classify_file_type(text)
        assert file_type == "bundle"

    def test_empty_text_ties_to_bundle_with_zero_confidence(self):
        assert classify_file_type("") == ("bundle", 0)

    def test_plain_declarations_are_vanilla(self):
        file_type, _ = classify_file_type("var a = 1;\nlet b = 2;\n")
        assert file_type == "vanilla"

    def test_confidence_is_not_clamped(self):
        _, confidence = classify_file_type("webpackJsonp " * 2000)
        assert confidence > 100


# ── Functions ──


class TestFunctions:
    def test_add_js(self):
        result = analyze("function add(a, b) {\nreturn a + b;\n}\n")
        assert len(result.functions) == 1
        fn = result.functions[0]
        assert fn.name == "add"
        assert fn.kind == "function"
        assert fn.parameters == ["a", "b"]
        assert (fn.line_start, fn.line_end) == (1, 3)
        assert fn.complexity == 1
        assert result.code_metrics.function_count == 1

    def test_arrow_function(self):
        result = analyze("const double = (x) => x * 2;\n")
        assert [(f.name, f.kind, f.parameters) for f in result.functions] == [("double", "arrow", ["x"])]

    def test_async_function_matches_two_passes(self):
        result = analyze("async function load(url) {\n  return fetch(url);\n}\n")
        assert [f.kind for f in result.functions] == ["function", "async"]
        assert {f.name for f in result.functions} == {"load"}

    def test_empty_parameter_list(self):
        result = analyze("function noop() {\n}\n")
        assert result.functions[0].parameters == []

    def test_block_end_stops_at_first_lone_brace(self):
        src = textwrap.dedent("""\
        function outer(a) {
          if (a) {
            go();
          }
          return a;
        }
        """)
        fn = analyze(src).functions[0]
        assert fn.line_end == 4
        assert fn.complexity == 2

    def test_unclosed_block_runs_to_last_line(self):
        src = "function open(a) {\n  return a;\n"
        lines = src.split("\n")
        fn = analyze(src).functions[0]
        assert fn.line_end == len(lines)

    def test_complexity_counts_branches(self):
        assert complexity_of("if (a) {} else if (b) {} for (;;) {}") == 5
        assert complexity_of("while (x) { y = c ? 1 : 2; }") == 3


# ── Classes ──


class TestClasses:
    def test_class_members_and_heritage(self):
        src = textwrap.dedent("""\
        class Store extends Base {
          count = 0;
          increment() {
          }
        }
        """)
        result = analyze(src)
        assert len(result.classes) == 1
        cls = result.classes[0]
        assert cls.name == "Store"
        assert cls.extends == "Base"
        assert cls.implements == []
        assert cls.methods == ["increment"]
        assert cls.properties == ["count"]
        assert (cls.line_start, cls.line_end) == (1, 4)

    def test_implements_list(self):
        src = "class Repo implements Reader, Writer {\n}\n"
        cls = analyze(src).classes[0]
        assert cls.implements == ["Reader", "Writer"]
        assert cls.extends is None


# ── Imports / exports ──


class TestImportsExports:
    def test_import_forms(self):
        src = textwrap.dedent("""\
        import { useState, useEffect } from 'react';
        import 'polyfill';
        const fs = require('fs');
        const Page = import('./page');
        """)
        result = analyze(src)
        summary = [(i.source, i.kind, i.items, i.line) for i in result.imports]
        assert summary == [
            ("react", "es6", ["useState", "useEffect"], 1),
            ("polyfill", "es6", ["default"], 2),
            ("fs", "commonjs", ["default"], 3),
            ("./page", "dynamic", ["dynamic"], 4),
        ]
        assert result.dependencies == ["react", "polyfill", "fs", "./page"]

    @pytest.mark.parametrize("line", [
        "import React from 'react';",
        "import * as path from 'path';",
        "import React, { Component } from 'react';",
    ])
    def test_default_and_namespace_imports_not_extracted(self, line):
        result = analyze(line + "\n")
        assert result.imports == []
        assert result.dependencies == []
        assert result.code_metrics.import_count == 0

    def test_exports(self):
        src = textwrap.dedent("""\
        export const a = 1;
        export function b() {}
        export default App;
        export * from './more';
        """)
        exports = [(e.kind, e.items, e.line) for e in analyze(src).exports]
        assert exports == [
            ("named", ["a"], 1),
            ("named", ["b"], 2),
            ("default", ["App"], 3),
            ("all", ["./more"], 4),
        ]


# ── Libraries, metrics, opportunities ──


class TestLibrariesAndMetrics:
    def test_detect_axios(self):
        libs = {lib.name: lib for lib in detect_libraries("axios.get(u);\naxios.post(u, d);\n")}
        assert libs["Axios"].usage_count == 2
        assert libs["Axios"].confidence == 0.8

    def test_no_libraries_in_empty_text(self):
        assert detect_libraries("") == []

    def test_line_metrics(self):
        metrics = analyze("// c\n\nconst x = 1;\n").code_metrics
        assert metrics.total_lines == 4
        assert metrics.comment_lines == 1
        assert metrics.empty_lines == 2
        assert metrics.code_lines == 1

    def test_many_imports_opportunity(self):
        src = "".join(f"const m{i} = require('m{i}');\n" for i in range(11))
        result = analyze(src)
        assert result.code_metrics.import_count == 11
        assert (
            "High number of imports detected. Consider bundling or using barrel exports."
            in result.optimization_opportunities
        )

    def test_large_function_opportunity(self):
        body = "\n".join(f"  step{i}();" for i in range(10))
        result = analyze(f"function big() {{\n{body}\n}}\n")
        assert result.optimization_opportunities[0].startswith("1 large functions detected.")

    def test_insights_left_empty(self):
        assert analyze("function f() {\n}\n").insights == []


@pytest.mark.parametrize("src", [
    "",
    "function add(a, b) {\nreturn a + b;\n}\n",
    "import x from 'y'; export const z = 1;",
    "class A extends B {\n  m() {\n  }\n}\n",
])
def test_analyze_is_idempotent(src):
    assert analyze(src) == analyze(src)
