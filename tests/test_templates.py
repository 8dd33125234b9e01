"""Tests for template values and the Jinja2 engine."""

import pytest

from watch_actions.templates import JinjaTemplateEngine, RenderError, Template, TemplateType, is_templated


@pytest.mark.parametrize(
    "text, expected",
    [
        ("plain text", False),
        ("{{ ctx.watch_id }}", True),
        ("{% if x %}y{% endif %}", True),
        ("{# note #}", True),
        ("{#\n multi-line #}", True),
        ("Ticket {#42}", False),
        ("{#}", False),
        ("single { brace }", False),
    ],
)
def test_is_templated(text, expected):
    assert is_templated(text) is expected


def test_parse_picks_literal_or_inline():
    assert Template.parse("hello") == Template.literal("hello")
    assert Template.parse("hi {{ name }}") == Template.inline("hi {{ name }}")


def test_equality_compares_type_and_text():
    assert Template.literal("x") == Template.literal("x")
    assert Template.literal("x") != Template.inline("x")
    assert Template.inline("x") != Template.inline("y")


@pytest.mark.parametrize(
    "template, scalar",
    [
        (Template.literal("hello"), True),
        (Template.inline("{{ a }}"), True),
        (Template.inline("hello"), False),
        (Template.literal("{{ a }}"), False),
        (Template.file("alert.txt"), False),
    ],
)
def test_is_scalar(template, scalar):
    assert template.is_scalar is scalar


def test_default_type_is_inline():
    assert Template(text="x").type == TemplateType.INLINE


def test_render_inline():
    engine = JinjaTemplateEngine()
    model = {"ctx": {"watch_id": "watch1", "payload": {"count": 3}}}
    result = engine.render(Template.inline("{{ ctx.watch_id }}: {{ ctx.payload.count }}"), model)
    assert result == "watch1: 3"


def test_render_literal_returns_text_unchanged():
    engine = JinjaTemplateEngine()
    assert engine.render(Template.literal("{{ not rendered }}"), {}) == "{{ not rendered }}"


def test_render_missing_variable_raises():
    engine = JinjaTemplateEngine()
    with pytest.raises(RenderError):
        engine.render(Template.inline("{{ ctx.missing }}"), {"ctx": {}})


def test_render_syntax_error_raises():
    engine = JinjaTemplateEngine()
    with pytest.raises(RenderError):
        engine.render(Template.inline("{{ unclosed"), {})


def test_render_is_sandboxed():
    engine = JinjaTemplateEngine()
    with pytest.raises(RenderError):
        engine.render(Template.inline("{{ ''.__class__.__mro__ }}"), {})


def test_file_template_without_directory_raises():
    engine = JinjaTemplateEngine()
    with pytest.raises(RenderError, match="no template directory"):
        engine.render(Template.file("alert.txt"), {})


def test_file_template_from_directory(tmp_path):
    (tmp_path / "alert.txt").write_text("Watch {{ ctx.watch_id }} fired\n", encoding="utf-8")
    engine = JinjaTemplateEngine(tmp_path)
    result = engine.render(Template.file("alert.txt"), {"ctx": {"watch_id": "watch1"}})
    assert result == "Watch watch1 fired\n"


def test_missing_file_template_raises(tmp_path):
    engine = JinjaTemplateEngine(tmp_path)
    with pytest.raises(RenderError):
        engine.render(Template.file("missing.txt"), {})
