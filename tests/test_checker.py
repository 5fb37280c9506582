import time

from perfxray.checker import (
    MAX_HITS_PER_RULE,
    SNIPPET_WIDTH,
    apply_filters,
    check_file,
    check_files,
    line_number_at,
    snippet_at,
)
from perfxray.rules import define_rule
from perfxray.severity import Severity


def _by_rule(findings, rule_id):
    return [finding for finding in findings if finding.rule_id == rule_id]


def _reader(contents):
    def read(path):
        if path not in contents:
            raise FileNotFoundError(path)
        return contents[path]

    return read


def test_two_sync_calls_on_same_line_yield_two_findings():
    content = (
        "const fs = require('fs');\n"
        "async function load() {\n"
        "  const a = readFileSync('x'); const b = readFileSync('y');\n"
        "}\n"
    )

    findings = _by_rule(check_file("a.js", content), "sync-io")

    assert len(findings) == 2
    assert all(finding.line == 3 for finding in findings)
    assert all(finding.severity is Severity.HIGH for finding in findings)
    assert findings[0].snippet == "const a = readFileSync('x'); const b = readFileSync('y');"
    assert findings[0].file == "a.js"


def test_select_without_limit_is_unbounded():
    findings = check_file("users.sql", "SELECT * FROM users\n")

    assert len(findings) == 1
    assert findings[0].rule_id == "unbounded-query"
    assert findings[0].rule_name == "Unbounded SQL Query"
    assert findings[0].severity is Severity.HIGH
    assert findings[0].line == 1


def test_multiline_match_reports_line_of_match_start():
    content = (
        "// load users\n"
        "for (const id of ids) {\n"
        "  const user = await db.users.findOne(id);\n"
        "}\n"
    )

    findings = _by_rule(check_file("service.ts", content), "n-plus-one")

    assert len(findings) == 1
    assert findings[0].line == 2
    assert findings[0].severity is Severity.CRITICAL


def test_hits_are_capped_per_rule_and_file():
    content = "".join(f"console.log('line {index}');\n" for index in range(12))

    findings = _by_rule(check_file("noisy.js", content), "console-in-prod")

    assert len(findings) == MAX_HITS_PER_RULE
    assert [finding.line for finding in findings] == [1, 2, 3, 4, 5]


def test_cap_does_not_stop_other_rules():
    content = "".join("console.log(1);\n" for _ in range(8)) + "readFileSync('x');\n"

    findings = check_file("noisy.js", content)

    assert len(_by_rule(findings, "console-in-prod")) == MAX_HITS_PER_RULE
    assert len(_by_rule(findings, "sync-io")) == 1


def test_findings_follow_catalog_order_then_match_order():
    content = "console.log(readFileSync('a'));\n"

    findings = check_file("order.js", content)

    assert [finding.rule_id for finding in findings] == ["sync-io", "console-in-prod"]


def test_zero_width_matches_are_skipped_and_terminate():
    optional_x = define_rule(
        id="optional-x",
        name="Optional x",
        severity=Severity.LOW,
        languages=("js",),
        pattern=r"x*",
        message="m",
        suggestion="s",
    )
    lookahead = define_rule(
        id="lookahead",
        name="Lookahead only",
        severity=Severity.LOW,
        languages=("js",),
        pattern=r"(?=a)",
        message="m",
        suggestion="s",
    )

    findings = check_file("z.js", "abc x\naaa\n", rules=[optional_x, lookahead])

    assert [(finding.rule_id, finding.line) for finding in findings] == [("optional-x", 1)]


def test_rules_ignore_unknown_languages():
    assert check_file("notes.md", "readFileSync('x'); SELECT * FROM users") == []
    assert check_file("Makefile", "console.log(1)") == []


def test_long_lines_are_truncated_to_snippet_width():
    line = "console.log('" + "a" * 200 + "');"

    finding = _by_rule(check_file("long.js", line), "console-in-prod")[0]

    assert len(finding.snippet) == SNIPPET_WIDTH
    assert finding.snippet.endswith("...")
    assert finding.snippet[:117] == line[:117]


def test_short_lines_are_trimmed_but_not_truncated():
    assert snippet_at(["    console.log(1);   "], 0) == "console.log(1);"
    exact = "x" * SNIPPET_WIDTH
    assert snippet_at([exact], 0) == exact
    assert snippet_at([], 3) == ""


def test_line_number_at_counts_newlines_before_offset():
    content = "a\nb\nc"
    assert line_number_at(content, 0) == 1
    assert line_number_at(content, 2) == 2
    assert line_number_at(content, 4) == 3


SEVERITY_MIX = "readFileSync('a');\nconsole.log('b');\n"


def test_check_files_applies_severity_floor():
    read = _reader({"mix.js": SEVERITY_MIX})

    assert [f.rule_id for f in check_files(["mix.js"], read)] == ["sync-io", "console-in-prod"]
    assert [f.rule_id for f in check_files(["mix.js"], read, severity="high")] == ["sync-io"]
    assert [f.rule_id for f in check_files(["mix.js"], read, severity="medium")] == ["sync-io"]
    assert check_files(["mix.js"], read, severity="critical") == []


def test_unknown_severity_floor_means_no_filtering():
    read = _reader({"mix.js": SEVERITY_MIX})

    assert len(check_files(["mix.js"], read, severity="urgent")) == 2


def test_unreadable_files_are_skipped():
    def read(path):
        if path == "broken.js":
            raise UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")
        return _reader({"a.js": SEVERITY_MIX, "c.js": SEVERITY_MIX})(path)

    findings = check_files(["a.js", "missing.js", "broken.js", "c.js"], read)

    assert [finding.file for finding in findings] == ["a.js", "a.js", "c.js", "c.js"]


def test_empty_file_set_yields_no_findings():
    assert check_files([], _reader({})) == []


def test_check_files_is_deterministic_and_keeps_path_order():
    contents = {f"f{index}.js": SEVERITY_MIX * (index % 3 + 1) for index in range(12)}
    paths = sorted(contents, reverse=True)
    read = _reader(contents)

    first = check_files(paths, read)
    second = check_files(paths, read)
    parallel = check_files(paths, read, jobs=4)

    assert first == second == parallel
    assert [finding.file for finding in first][:2] == [paths[0], paths[0]]


def test_should_stop_cancels_between_files():
    seen = []
    contents = {"a.js": SEVERITY_MIX, "b.js": SEVERITY_MIX}

    def read(path):
        seen.append(path)
        return contents[path]

    findings = check_files(["a.js", "b.js"], read, should_stop=lambda: len(seen) >= 1)

    assert seen == ["a.js"]
    assert {finding.file for finding in findings} == {"a.js"}


def test_apply_filters_returns_decorated_copies():
    findings = check_file("mix.js", SEVERITY_MIX)

    decorated = apply_filters(findings, severity="high", fix=True)

    assert [finding.rule_id for finding in decorated] == ["sync-io"]
    assert decorated[0].show_fix is True
    assert all(finding.show_fix is False for finding in findings)
    assert len(apply_filters(findings)) == 2


def _unclosed_slash_python_module(functions):
    header = '"""See https://example.org/docs for details."""\n'
    body = "".join(
        f"def f{index}(*args, **kwargs):\n    return a{index} + b{index} * c{index}\n" for index in range(functions)
    )
    return header + body


def _unclosed_slash_js_module(lines):
    return "// util\nconst r = x / 2;\n" + "".join(f"const h{index} = (a, b) => a + b * {index};\n" for index in range(lines))


def test_unclosed_slash_with_many_operators_scans_quickly():
    python_source = _unclosed_slash_python_module(500)
    js_source = _unclosed_slash_js_module(1000)
    assert python_source.count("\n") > 1000

    started = time.perf_counter()
    python_findings = check_file("mod.py", python_source)
    js_findings = check_file("util.js", js_source)
    elapsed = time.perf_counter() - started

    assert elapsed < 5
    assert _by_rule(python_findings, "blocking-regex") == []
    assert _by_rule(js_findings, "blocking-regex") == []
