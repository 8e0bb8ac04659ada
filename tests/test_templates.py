from pathlib import Path

import pytest
from markupsafe import Markup

from inkpot.content import Page
from inkpot.templates import RenderError, TemplateEngine, build_context


def write_template(tmp_path: Path, name: str, text: str) -> Path:
    path = tmp_path / "templates" / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_render_escapes_text_but_not_content(tmp_path):
    template = write_template(
        tmp_path, "default.html.jinja", "<h1>{{ title }}</h1>{{ content }}"
    )
    page = Page(title="<script>alert(1)</script>", content=Markup("<p>Hi</p>"))
    html = TemplateEngine().render(page, template)
    assert "&lt;script&gt;" in html
    assert "<script>" not in html
    assert "<p>Hi</p>" in html


def test_render_exposes_frontmatter_and_page(tmp_path):
    template = write_template(
        tmp_path, "t.html.jinja", "{{ frontmatter.mood }}|{{ page.author }}"
    )
    page = Page(author="Ada", frontmatter={"mood": "sunny"})
    assert TemplateEngine().render(page, template) == "sunny|Ada"


def test_render_accepts_mappings(tmp_path):
    template = write_template(tmp_path, "m.html.jinja", "{{ name }}")
    assert TemplateEngine().render({"name": "Ada & Co"}, template) == "Ada &amp; Co"


def test_missing_template_raises(tmp_path):
    missing = tmp_path / "templates" / "nope.html.jinja"
    with pytest.raises(RenderError) as excinfo:
        TemplateEngine().render(Page(), missing)
    assert excinfo.value.source_path == missing
    assert "template not found" in excinfo.value.message


def test_syntax_error_raises(tmp_path):
    template = write_template(tmp_path, "bad.html.jinja", "{% for x in %}")
    with pytest.raises(RenderError) as excinfo:
        TemplateEngine().render(Page(), template)
    assert "failed to parse template" in excinfo.value.message


def test_undefined_field_raises(tmp_path):
    template = write_template(tmp_path, "u.html.jinja", "{{ nonexistent_field }}")
    with pytest.raises(RenderError) as excinfo:
        TemplateEngine().render(Page(), template)
    assert "undefined" in excinfo.value.message


def test_render_to_file_creates_directories(tmp_path):
    template = write_template(tmp_path, "t.html.jinja", "{{ title }}")
    output = tmp_path / "out" / "nested" / "page.html"
    TemplateEngine().render_to_file(Page(title="Hello"), template, output)
    assert output.read_text(encoding="utf-8") == "Hello"


def test_render_to_file_writes_nothing_on_failure(tmp_path):
    template = write_template(tmp_path, "u.html.jinja", "{{ missing }}")
    output = tmp_path / "out" / "page.html"
    with pytest.raises(RenderError):
        TemplateEngine().render_to_file(Page(), template, output)
    assert not output.exists()


def test_build_context_rejects_other_types():
    with pytest.raises(TypeError):
        build_context(42)
    context = build_context(Page(title="T"))
    assert context["title"] == "T"
    assert isinstance(context["page"], Page)


def test_missing_frontmatter_key_renders_empty(tmp_path):
    template = write_template(
        tmp_path,
        "f.html.jinja",
        "{% if frontmatter.image %}<img src=\"{{ frontmatter.image }}\">{% endif %}"
        "[{{ frontmatter.subtitle }}]{{ content }}",
    )
    engine = TemplateEngine()
    bare = engine.render(Page(content=Markup("<p>x</p>")), template)
    assert bare == "[]<p>x</p>"

    page = Page(frontmatter={"image": "/a.png", "subtitle": "Sub"})
    assert engine.render(page, template) == '<img src="/a.png">[Sub]'


def test_undefined_top_level_name_still_fails_with_frontmatter(tmp_path):
    template = write_template(tmp_path, "g.html.jinja", "{{ frontmatter.x }}{{ hero }}")
    with pytest.raises(RenderError):
        TemplateEngine().render(Page(frontmatter={"x": 1}), template)
