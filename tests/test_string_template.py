from qflag.common import render_template, sanitize_identifier


def test_templates():
    "test the template function"
    assert render_template("{{one}} $var {{two}} ${var2} {{three}}", {"one": "X", "three": "Y"}) == "X $var {{two}} ${var2} Y"
    assert render_template("a{{x}}b{{x}}c", {"x": "-"}) == "a-b-c"


def test_templates_values_not_rescanned():
    "substituted values are emitted verbatim"
    assert render_template("{{a}}", {"a": "{{b}}", "b": "nope"}) == "{{b}}"


def test_templates_shell_braces():
    "shell syntax with single braces is left alone"
    assert render_template("${_{{I}}_cache[$key]+set}", {"I": "prog"}) == "${_prog_cache[$key]+set}"


def test_sanitize_identifier():
    "program names become identifiers"
    assert sanitize_identifier("prog") == "prog"
    assert sanitize_identifier("my-tool.exe") == "my_tool_exe"
    assert sanitize_identifier("9lives") == "_9lives"
    assert sanitize_identifier("") == "_"
