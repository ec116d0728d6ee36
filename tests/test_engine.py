"""End-to-end tests: rewritten templates rendered through Jinja2."""

from pathlib import Path

import pytest
from hypothesis import given, settings
from jinja2 import DictLoader as JinjaDictLoader
from jinja2 import FileSystemLoader, UndefinedError

from stylekit import (
    ComponentCompiler,
    ComponentExtension,
    ComponentLookupError,
    DictLoader,
    RewriteAmbiguityError,
    bind_registry,
    check_templates,
    create_environment,
)

from .conftest import write_component
from .strategies import TREE_DEFINITIONS, nested_markup

_TREE_ENV = create_environment(ComponentCompiler(DictLoader(TREE_DEFINITIONS)).compile())


class TestRendering:
    def test_matches_direct_render(self, env, registry) -> None:
        rendered = env.from_string("<Title>Hi</Title>").render()
        assert rendered == registry.render("Title", "Hi")
        assert rendered == '<h1 class="psc-Title">Hi</h1>'

    def test_nested_components(self, env) -> None:
        rendered = env.from_string("<Card><Title>Hi</Title></Card>").render()
        assert rendered == '<div class="psc-Card"><h1 class="psc-Title">Hi</h1></div>'

    def test_children_use_template_context(self, env) -> None:
        template = env.from_string(
            "<Card>{% for item in items %}<Title>{{ item }}</Title>{% endfor %}</Card>"
        )
        assert template.render(items=["a", "b"]) == (
            '<div class="psc-Card">'
            '<h1 class="psc-Title">a</h1><h1 class="psc-Title">b</h1>'
            "</div>"
        )

    def test_variables_in_children_are_escaped(self, env) -> None:
        rendered = env.from_string("<Title>{{ name }}</Title>").render(name="<script>")
        assert rendered == '<h1 class="psc-Title">&lt;script&gt;</h1>'

    def test_surrounding_html_is_untouched(self, env) -> None:
        rendered = env.from_string('<main id="m"><Title>Hi</Title></main>').render()
        assert rendered == '<main id="m"><h1 class="psc-Title">Hi</h1></main>'

    def test_attributes_are_ignored_by_render(self, env) -> None:
        rendered = env.from_string('<Title id="x" data-n="{{ n }}">Hi</Title>').render()
        assert rendered == '<h1 class="psc-Title">Hi</h1>'

    def test_self_closing_component(self, env) -> None:
        assert env.from_string("<Card />").render() == '<div class="psc-Card"></div>'

    def test_strict_undefined_by_default(self, env) -> None:
        with pytest.raises(UndefinedError):
            env.from_string("<Title>{{ missing }}</Title>").render()

    @given(case=nested_markup)
    @settings(max_examples=100)
    def test_nested_trees_render_like_direct_calls(self, case) -> None:
        source, expected = case
        assert _TREE_ENV.from_string(source).render() == expected


class TestErrors:
    def test_unknown_component_is_lookup_error(self, env) -> None:
        template = env.from_string("<Footer>bye</Footer>")
        with pytest.raises(LookupError):
            template.render()

    def test_unknown_component_error_is_reportable(self, env) -> None:
        with pytest.raises(ComponentLookupError) as exc_info:
            env.from_string("<Titel>Hi</Titel>").render()
        assert "Did you mean 'Title'?" in exc_info.value.format_compact()

    def test_misnested_template_fails_to_load(self, registry) -> None:
        env = create_environment(
            registry, loader=JinjaDictLoader({"page.html": "<Card><Title>Hi</Card></Title>"})
        )
        with pytest.raises(RewriteAmbiguityError) as exc_info:
            env.get_template("page.html")
        assert exc_info.value.filename == "page.html"

    def test_lenient_environment(self, registry) -> None:
        env = create_environment(registry, strict=False)
        assert env.component_strict is False
        assert env.from_string("<Card>{% if true %}x{% endif %}</Card>").render() == (
            '<div class="psc-Card">x</div>'
        )


class TestRegistryBinding:
    def test_rebind_after_recompile(
        self, compiler: ComponentCompiler, components_dir: Path
    ) -> None:
        env = create_environment(compiler.compile())
        template = env.from_string("<Badge>new</Badge>")
        with pytest.raises(ComponentLookupError):
            template.render()

        write_component(components_dir, "badge", "tag: span\n")
        bind_registry(env, compiler.compile())
        assert template.render() == '<span class="psc-Badge">new</span>'

    def test_extension_alone_starts_empty(self, registry) -> None:
        from jinja2 import Environment

        env = Environment(extensions=[ComponentExtension], autoescape=True)
        with pytest.raises(ComponentLookupError, match="No components are registered"):
            env.from_string("<Title>Hi</Title>").render()
        bind_registry(env, registry)
        assert env.from_string("<Title>Hi</Title>").render() == '<h1 class="psc-Title">Hi</h1>'

    def test_extra_extensions_are_kept(self, registry) -> None:
        env = create_environment(registry, extensions=["jinja2.ext.loopcontrols"])
        template = env.from_string(
            "{% for i in [1, 2, 3] %}{% if i == 2 %}{% break %}{% endif %}<Title>{{ i }}</Title>{% endfor %}"
        )
        assert template.render() == '<h1 class="psc-Title">1</h1>'


class TestWithoutAutoescape:
    def test_nested_components_in_plain_environment(self, registry) -> None:
        from jinja2 import Environment

        env = Environment(extensions=[ComponentExtension])
        bind_registry(env, registry)
        rendered = env.from_string("<Card><Title>Hi</Title></Card>").render()
        assert rendered == '<div class="psc-Card"><h1 class="psc-Title">Hi</h1></div>'

    def test_literal_html_children_pass_through(self, registry) -> None:
        from jinja2 import select_autoescape

        env = create_environment(registry, autoescape=select_autoescape(default_for_string=False))
        rendered = env.from_string("<Title><em>Hi</em></Title>").render()
        assert rendered == '<h1 class="psc-Title"><em>Hi</em></h1>'

    def test_autoescape_off_leaves_variables_raw(self, registry) -> None:
        env = create_environment(registry, autoescape=False)
        rendered = env.from_string("<Title>{{ text }}</Title>").render(text="<b>x</b>")
        assert rendered == '<h1 class="psc-Title"><b>x</b></h1>'


class TestFileTemplates:
    def test_filesystem_templates(self, registry, tmp_path: Path) -> None:
        templates = tmp_path / "templates"
        templates.mkdir()
        (templates / "base.html").write_text("<html><body>{% block body %}{% endblock %}</body></html>")
        (templates / "page.html").write_text(
            '{% extends "base.html" %}{% block body %}<Card><Title>{{ title }}</Title></Card>{% endblock %}'
        )
        env = create_environment(registry, loader=FileSystemLoader(str(templates)))
        assert env.get_template("page.html").render(title="Home") == (
            '<html><body><div class="psc-Card"><h1 class="psc-Title">Home</h1></div></body></html>'
        )

    def test_check_templates_passes(self, registry) -> None:
        env = create_environment(
            registry,
            loader=JinjaDictLoader({"a.html": "<Title>a</Title>", "b.html": "<p>b</p>"}),
        )
        assert check_templates(env) == 2

    def test_check_templates_reports_unknown_component(self, registry) -> None:
        env = create_environment(
            registry,
            loader=JinjaDictLoader({"a.html": "<Title>a</Title>", "b.html": "<Footer>b</Footer>"}),
        )
        with pytest.raises(ComponentLookupError) as exc_info:
            check_templates(env)
        assert exc_info.value.template == "b.html"
        assert "b.html" in str(exc_info.value)

    def test_check_named_templates_only(self, registry) -> None:
        env = create_environment(
            registry,
            loader=JinjaDictLoader({"a.html": "<Title>a</Title>", "b.html": "<Footer>b</Footer>"}),
        )
        assert check_templates(env, ["a.html"]) == 1

    def test_check_requires_loader(self, env) -> None:
        with pytest.raises(TypeError):
            check_templates(env)
