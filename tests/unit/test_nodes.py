"""
Unit Tests for the Render Tree
==============================

Node rendering, builder ownership rules, immutability and render context.
"""

import pytest

from pagecraft.core.rendering.context import RenderContext, RenderInvariantError, SlotKey
from pagecraft.core.rendering.escaping import InvalidInputError
from pagecraft.core.rendering.nodes import (
    EMPTY,
    Element,
    Fragment,
    RawMarkup,
    Slot,
    Tag,
    Text,
    render,
    tag,
)

USER_NAME = SlotKey("user_name", default="guest")


class TestLeafNodes:
    """Test text and raw markup leaves."""

    def test_text_is_encoded(self):
        assert Text("<b>bold</b>").render() == "&lt;b&gt;bold&lt;/b&gt;"

    def test_raw_markup_is_emitted_verbatim(self):
        assert RawMarkup("<b>bold</b>").render() == "<b>bold</b>"

    def test_strings_passed_as_children_are_encoded(self):
        assert Tag("p").child("<script>").render() == "<p>&lt;script&gt;</p>"

    def test_empty_fragment_renders_nothing(self):
        assert EMPTY.render() == ""
        assert Fragment().render() == ""


class TestTagBuilder:
    """Test the fluent builder."""

    def test_nested_render(self):
        html = Tag("div").id("main").add_class("box").child(Tag("span").text("hi")).render()
        assert html == '<div id="main" class="box"><span>hi</span></div>'

    def test_void_elements_self_close(self):
        assert Tag("br").render() == "<br />"
        assert Tag("input").attr("type", "text").render() == '<input type="text" />'

    def test_self_closing_element_rejects_children(self):
        with pytest.raises(RenderInvariantError):
            Tag("img").child("text")

    def test_tag_helper_maps_underscores_to_hyphens(self):
        html = tag("button", "Go", data_id="7", aria_label="Go").render()
        assert html == '<button data-id="7" aria-label="Go">Go</button>'

    def test_href_rejects_disallowed_scheme_at_construction(self):
        with pytest.raises(InvalidInputError):
            Tag("a").href("javascript:alert(1)")

    def test_allowed_href_renders_attribute_encoded(self):
        url = "https://example.com/?a=1&b=2"
        assert Tag("a").href(url).render() == '<a href="https://example.com/?a=1&amp;b=2"></a>'

    def test_width_validates_css_length(self):
        assert Tag("div").width("50%").render() == '<div style="width: 50%;"></div>'
        with pytest.raises(InvalidInputError):
            Tag("div").width("50%; position: fixed")

    def test_id_is_validated(self):
        with pytest.raises(InvalidInputError):
            Tag("div").id("x').remove();alert('xss');//")

    def test_hx_rejects_unknown_verb(self):
        with pytest.raises(ValueError):
            Tag("button").hx("connect", "/x")

    def test_hx_validates_url(self):
        with pytest.raises(InvalidInputError):
            Tag("button").hx("post", "javascript:alert(1)")
        assert Tag("button").hx("post", "/save/module-1").build().get_attribute("hx-post") == "/save/module-1"

    def test_builder_cannot_have_two_parents(self):
        shared = Tag("span")
        Tag("div").child(shared)
        with pytest.raises(RenderInvariantError):
            Tag("div").child(shared)

    def test_builder_cannot_contain_itself(self):
        outer = Tag("div")
        inner = Tag("div")
        outer.child(inner)
        with pytest.raises(RenderInvariantError):
            inner.child(outer)
        with pytest.raises(RenderInvariantError):
            outer.child(outer)

    def test_unsupported_child_type_raises(self):
        with pytest.raises(RenderInvariantError):
            Tag("div").child(42)

    def test_none_child_is_ignored(self):
        assert Tag("div").child(None).child_count == 0

    def test_prepend_and_append_wrap_declared_children(self):
        html = Tag("ul").child(Tag("li").text("b")).prepend(Tag("li").text("a")).append(Tag("li").text("c")).render()
        assert html == "<ul><li>a</li><li>b</li><li>c</li></ul>"
        assert Tag("ul").prepend("x").child_count == 0


class TestElement:
    """Test immutable element trees."""

    def test_rendering_twice_is_byte_identical(self):
        element = Tag("div").add_class("a").child(Tag("p").text("x & y")).build()
        assert element.render() == element.render()

    def test_element_is_immutable(self):
        element = Tag("div").build()
        with pytest.raises(AttributeError):
            element.tag = "span"

    def test_element_attributes_are_frozen(self):
        element = Tag("div").add_class("a").build()
        with pytest.raises(RenderInvariantError):
            element.attributes.add_class("b")

    def test_builder_changes_after_build_do_not_leak(self):
        builder = Tag("div").add_class("a")
        element = builder.build()
        builder.add_class("b").text("later")
        assert element.render() == '<div class="a"></div>'

    def test_build_is_repeatable(self):
        builder = Tag("div").child(Tag("span").text("x"))
        assert builder.build() == builder.build()

    def test_built_elements_may_be_shared(self):
        shared = Tag("span").text("s").build()
        html = Fragment(Tag("div").child(shared), Tag("div").child(shared)).render()
        assert html == "<div><span>s</span></div><div><span>s</span></div>"

    def test_element_constructor_rejects_children_on_self_closing(self):
        with pytest.raises(RenderInvariantError):
            Element("br", children=["x"], self_closing=True)

    def test_classes_property(self):
        assert Tag("div").add_class("a b").build().classes == ("a", "b")

    def test_child_stream_order(self):
        element = Element("div", children=["b"], leading=["a"], trailing=["c"])
        rendered = [node.render(RenderContext.empty()) for node in element.child_stream(RenderContext.empty())]
        assert rendered == ["a", "b", "c"]


class TestLazyChildrenAndSlots:
    """Test context-dependent children."""

    def test_lazy_children_see_the_context(self):
        builder = Tag("p").lazy(lambda ctx: f"Hello {ctx.get(USER_NAME)}")
        assert builder.render(RenderContext.of({USER_NAME: "<Ann>"})) == "<p>Hello &lt;Ann&gt;</p>"

    def test_lazy_children_may_produce_sequences(self):
        builder = Tag("ul").lazy(lambda ctx: [Tag("li").text(str(n)) for n in range(3)])
        assert builder.render() == "<ul><li>0</li><li>1</li><li>2</li></ul>"

    def test_lazy_children_may_produce_nothing(self):
        assert Tag("div").lazy(lambda ctx: None).render() == "<div></div>"

    def test_slot_renders_default_and_encodes_strings(self):
        slot = Slot(USER_NAME)
        assert slot.render() == "guest"
        assert slot.render(RenderContext.of({USER_NAME: "<x>"})) == "&lt;x&gt;"

    def test_slot_renders_node_values(self):
        context = RenderContext.of({USER_NAME: RawMarkup("<em>ann</em>")})
        assert Tag("p").child(Slot(USER_NAME)).render(context) == "<p><em>ann</em></p>"

    def test_render_helper_accepts_strings_and_builders(self):
        assert render("<x>") == "&lt;x&gt;"
        assert render(Tag("b")) == "<b></b>"


class TestRenderContext:
    """Test the immutable render context."""

    def test_with_value_returns_new_context(self):
        base = RenderContext.empty()
        updated = base.with_value(USER_NAME, "ann")
        assert base.get(USER_NAME) == "guest"
        assert updated.get(USER_NAME) == "ann"

    def test_slots_are_read_only(self):
        context = RenderContext.of({USER_NAME: "ann"})
        with pytest.raises(TypeError):
            context.slots["user_name"] = "bob"

    def test_callable_default_receives_context(self):
        depth_key = SlotKey("depth", default=lambda ctx: ctx.depth)
        assert RenderContext.empty().descend().get(depth_key) == 1

    def test_descend_beyond_limit_raises(self):
        context = RenderContext.empty(max_depth=1).descend()
        with pytest.raises(RenderInvariantError):
            context.descend()

    def test_deep_tree_beyond_limit_raises_at_render(self):
        root = Tag("div")
        current = root
        for _ in range(5):
            nested = Tag("div")
            current.child(nested)
            current = nested
        element = root.build()
        assert element.render(RenderContext.empty(max_depth=10)).count("<div>") == 6
        with pytest.raises(RenderInvariantError):
            element.render(RenderContext.empty(max_depth=3))

    def test_slot_keys_compare_by_name(self):
        assert SlotKey("a", default=1) == SlotKey("a", default=2)
