"""Tests for the markup writer.

Covers the render algorithm, self-closing handling per language, attribute
string construction and parsing, and the string-conversion boundary.
"""

import logging

import pytest

from markup_tree.shared import (
    AttributeParseError,
    AttributeTypeError,
    DiagnosticSeverity,
    GlobalConfig,
    InvalidTagError,
    Language,
    MarkupConfig,
    WriterConfig,
)
from markup_tree.tree import Node
from markup_tree.writer import Writer, default_writer


def _failing_preparer(node: Node) -> None:
    raise RuntimeError(f"cannot prepare {node.tag}")


class TestRenderScenarios:
    """End-to-end rendering scenarios."""

    def test_multi_valued_class(self) -> None:
        node = Node(tag="div")
        node.set_attribute("class", ["a", "b"])

        assert Writer().render(node) == '<div class="a b"></div>'

    def test_self_closing_per_language(self) -> None:
        node = Node(tag="input")
        node.set_attribute("type", "text")

        assert Writer(language=Language.HTML5).render(node) == '<input type="text">'
        assert Writer(language=Language.XHTML).render(node) == '<input type="text" />'
        assert Writer(language=Language.XML1).render(node) == '<input type="text" />'

    def test_content_and_child_order(self) -> None:
        node = Node(tag="div").set_content("X")
        node.add_child(Node(tag="span"))
        writer = Writer()

        assert writer.render(node) == "<div>X<span></span></div>"

        node.render_children_before_content(True)

        assert writer.render(node) == "<div><span></span>X</div>"

    def test_bare_attribute_renders_name_as_value(self) -> None:
        node = Node(tag="button")
        node.attribute("disabled")

        assert Writer().render(node) == '<button disabled="disabled"></button>'

    def test_before_and_after_element_fragments(self) -> None:
        node = Node(tag="p")
        node.before_element("<!--c-->")
        node.after_element("<!--/c-->")

        assert Writer().render(node) == "<!--c--><p></p><!--/c-->"

    def test_fragments_are_not_escaped(self) -> None:
        node = Node(tag="li").set_content("<b>&</b>")
        node.before_content("<i>").after_content("</i>")

        assert Writer().render(node) == "<li><i><b>&</b></i></li>"

    def test_nested_tree(self) -> None:
        root = Node(tag="ul")
        root.set_attribute("id", "menu")
        for label in ("one", "two"):
            item = root.add_child(Node(tag="li"))
            item.add_child(Node(tag="a")).set_attribute("href", f"/{label}").set_content(label)

        assert Writer().render(root) == (
            '<ul id="menu">'
            '<li><a href="/one">one</a></li>'
            '<li><a href="/two">two</a></li>'
            "</ul>"
        )

    def test_shared_child_is_rendered_under_each_parent(self) -> None:
        shared = Node(tag="hr")
        first = Node(tag="div")
        second = Node(tag="div")
        first.add_child(shared)
        second.add_child(shared)

        assert Writer().render(first) == "<div><hr></div>"
        assert Writer().render(second) == "<div><hr></div>"


class TestSelfClosingTags:
    """Test the self-closing registry."""

    def test_self_closing_discards_content_and_children(self) -> None:
        prepared = []
        node = Node(tag="br").set_content("lost")
        node.before_content("lost").after_content("lost")
        node.add_child(Node(tag="b", preparer=prepared.append))
        node.after_element("\n")

        assert Writer().render(node) == "<br>\n"
        assert prepared == []

    @pytest.mark.parametrize(
        "tag",
        ["hr", "br", "input", "meta", "base", "basefont", "col", "frame", "link", "param"],
    )
    def test_default_registry(self, tag: str) -> None:
        writer = Writer()

        assert writer.is_self_closing(tag)
        assert writer.render(Node(tag=tag)) == f"<{tag}>"

    def test_img_is_not_in_default_registry(self) -> None:
        assert Writer().render(Node(tag="img")) == "<img></img>"

    def test_registry_can_be_extended(self) -> None:
        writer = Writer(WriterConfig().with_self_closing_tags("img", "SOURCE"))
        node = Node(tag="img")
        node.set_attribute("src", "a.png")

        assert writer.render(node) == '<img src="a.png">'
        assert writer.is_self_closing("source")

    def test_registry_can_be_reduced(self) -> None:
        writer = Writer(WriterConfig().without_self_closing_tags("br"))

        assert writer.render(Node(tag="br")) == "<br></br>"


class TestAttributeString:
    """Test attribute string construction."""

    def test_insertion_order_is_kept(self) -> None:
        node = Node(tag="a")
        node.set_attribute("title", "t")
        node.set_attribute("href", "/")
        node.set_attribute("class", "x")

        assert Writer().render(node) == '<a title="t" href="/" class="x"></a>'

    def test_values_are_escaped(self) -> None:
        node = Node(tag="div")
        node.set_attribute("title", 'a<b>&"c')

        assert Writer().render(node) == '<div title="a&lt;b&gt;&amp;&quot;c"></div>'

    def test_scalar_types(self) -> None:
        node = Node(tag="div")
        node.set_attribute("tabindex", 3)
        node.set_attribute("draggable", True)
        node.set_attribute("data-coords", [1, 2.5])

        assert Writer().render(node) == (
            '<div tabindex="3" draggable="1" data-coords="1 2.5"></div>'
        )

    def test_booleans_render_as_one_and_empty(self) -> None:
        node = Node(tag="div")
        node.set_attribute("hidden", True)
        node.set_attribute("x", False)

        assert str(node) == '<div hidden="1" x=""></div>'

    def test_none_value_is_structured(self) -> None:
        node = Node(tag="div")
        node.set_attribute("x", None)

        assert str(node) == '<div x="[null]"></div>'

    def test_structured_values_are_json_encoded(self) -> None:
        node = Node(tag="div")
        node.set_attribute("data-config", {"a": 1})

        assert Writer().render(node) == '<div data-config="[{&quot;a&quot;:1}]"></div>'

    def test_structured_separators_are_configurable(self) -> None:
        writer = Writer(WriterConfig(structured_separators=(", ", ": ")))

        assert writer.attribute_text("data-x", ["a", {"b": 1}]) == '["a", {"b": 1}]'

    def test_build_from_mapping(self) -> None:
        text = Writer().build_attribute_string({"id": "x", "hidden": [], "class": ["a", "b"]})

        assert text == ' id="x" hidden="hidden" class="a b"'

    def test_build_from_mapping_value(self) -> None:
        text = Writer().build_attribute_string({"data-map": {"k": "v"}})

        assert text == ' data-map="{&quot;k&quot;:&quot;v&quot;}"'

    def test_build_from_raw_string(self) -> None:
        text = Writer().build_attribute_string('class="a b" id="x"')

        assert text == ' class="a b" id="x"'

    def test_build_rejects_other_types(self) -> None:
        with pytest.raises(AttributeTypeError, match="given: 'int'"):
            Writer().build_attribute_string(42)  # type: ignore

    @pytest.mark.parametrize("language", ["xml1", "xhtml", "html5"])
    def test_apostrophe_is_a_named_entity(self, language: str) -> None:
        attributes = {"title": "it's"}

        assert Writer(language=language).build_attribute_string(attributes) == ' title="it&apos;s"'


class TestParseAttributeString:
    """Test raw attribute string parsing."""

    def test_fragment_is_wrapped_in_host_tag(self) -> None:
        assert Writer().parse_attribute_string(' class="a b" id="x" ') == {
            "class": "a b",
            "id": "x",
        }

    def test_complete_tag_is_parsed_as_given(self) -> None:
        assert Writer().parse_attribute_string('<a href="/x" title="t"/>') == {
            "href": "/x",
            "title": "t",
        }

    def test_entities_are_decoded(self) -> None:
        assert Writer().parse_attribute_string('title="a &amp; b"') == {"title": "a & b"}

    def test_empty_string_yields_no_attributes(self) -> None:
        assert Writer().parse_attribute_string("   ") == {}

    @pytest.mark.parametrize("text", ['class="a', "class=a", 'id="x" id="y"', "<div"])
    def test_malformed_input_raises(self, text: str) -> None:
        with pytest.raises(AttributeParseError, match="Malformed attribute string"):
            Writer().parse_attribute_string(text)


class TestTagBuilder:
    """Test the standalone tag builder."""

    def test_tag_with_content(self) -> None:
        assert Writer().tag("em", {"class": "x"}, "hi") == '<em class="x">hi</em>'

    def test_tag_without_attributes(self) -> None:
        assert Writer().tag("p") == "<p></p>"

    def test_empty_tag_raises(self) -> None:
        with pytest.raises(InvalidTagError, match="Empty HTML tag"):
            Writer().tag("")

    def test_fragments_to_string_casts_items(self) -> None:
        assert Writer.fragments_to_string(["a", 1, None]) == "a1None"


class TestStringConversionBoundary:
    """Test render_safe, to_string and child isolation."""

    def test_render_raises_for_root_failure(self) -> None:
        node = Node(tag="div", preparer=_failing_preparer)

        with pytest.raises(RuntimeError, match="cannot prepare div"):
            Writer().render(node)

    def test_render_safe_substitutes_empty_markup(self) -> None:
        node = Node(tag="div")
        node.set_attribute("data-bad", object())

        result = Writer().render_safe(node)

        assert result.markup == ""
        assert not result.success
        diagnostic = result.get_diagnostics_by_severity(DiagnosticSeverity.ERROR)[0]
        assert diagnostic.component == "writer"
        assert diagnostic.details == {"tag": "div", "exception": "TypeError"}

    def test_to_string_returns_empty_string(self) -> None:
        node = Node(tag="div", preparer=_failing_preparer)

        assert Writer().to_string(node) == ""

    def test_failing_child_only_blanks_itself(self) -> None:
        root = Node(tag="div")
        root.add_child(Node(tag="p"))
        root.add_child(Node(tag="b", preparer=_failing_preparer))
        root.add_child(Node(tag="i"))

        result = Writer().render_safe(root)

        assert result.markup == "<div><p></p><i></i></div>"
        assert len(result.diagnostics) == 1
        assert result.diagnostics[0].details["tag"] == "b"

    def test_render_also_isolates_child_failures(self) -> None:
        root = Node(tag="div")
        root.add_child(Node(tag="b", preparer=_failing_preparer))

        assert Writer().render(root) == "<div></div>"

    def test_failure_is_logged_once(self, caplog) -> None:
        node = Node(tag="div", preparer=_failing_preparer)

        with caplog.at_level(logging.WARNING, logger="markup_tree.writer.writer"):
            Writer().to_string(node)

        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert "cannot prepare div" in warnings[0].getMessage()
        assert warnings[0].component == "writer"

    def test_failure_logging_can_be_disabled(self, caplog) -> None:
        writer = Writer(WriterConfig(report_render_failures=False))
        node = Node(tag="div", preparer=_failing_preparer)

        with caplog.at_level(logging.WARNING):
            result = writer.render_safe(node)

        assert result.has_errors()
        assert caplog.records == []

    def test_from_config_generates_correlation_id(self) -> None:
        writer = Writer.from_config(MarkupConfig())

        assert writer.correlation_id
        assert writer.render_safe(Node()).correlation_id == writer.correlation_id

    def test_from_config_keeps_given_correlation_id(self) -> None:
        writer = Writer.from_config(MarkupConfig(), correlation_id="req-2")

        assert writer.correlation_id == "req-2"

    def test_from_config_without_correlation_tracking(self) -> None:
        config = MarkupConfig(
            writer=WriterConfig.xhtml(),
            global_=GlobalConfig(enable_correlation_tracking=False),
        )

        writer = Writer.from_config(config, correlation_id="req-3")

        assert writer.correlation_id is None
        assert writer.language is Language.XHTML

    def test_correlation_id_reaches_diagnostics(self) -> None:
        node = Node(tag="div", preparer=_failing_preparer)

        result = Writer(correlation_id="req-1").render_safe(node)

        assert result.correlation_id == "req-1"
        assert result.diagnostics[0].correlation_id == "req-1"

    def test_metrics_are_collected(self) -> None:
        root = Node(tag="div")
        root.set_attribute("id", "x")
        root.add_child(Node(tag="p"))
        root.add_child(Node(tag="p"))

        result = Writer().render_safe(root)

        assert result.metrics.elements_rendered == 3
        assert result.metrics.attributes_rendered == 1
        assert result.metrics.characters_emitted == len(result.markup)


class TestDefaultWriter:
    """Test the shared default writer."""

    def test_default_writer_is_cached_html5(self) -> None:
        writer = default_writer()

        assert writer is default_writer()
        assert writer.language is Language.HTML5
