"""
Unit Tests for Attribute Sets
=============================
"""

import pytest

from pagecraft.core.rendering.attributes import AttributeSet
from pagecraft.core.rendering.context import RenderInvariantError
from pagecraft.core.rendering.escaping import InvalidInputError


class TestAttributeSet:
    """Test ordered attribute storage and class merging."""

    def test_attributes_render_in_insertion_order(self):
        attributes = AttributeSet().set("id", "main").set("title", "Hello").set("data-x", "1")
        assert attributes.render() == ' id="main" title="Hello" data-x="1"'

    def test_replacing_a_value_keeps_first_position(self):
        attributes = AttributeSet().set("title", "a").set("id", "x").set("title", "b")
        assert list(attributes.items()) == [("title", "b"), ("id", "x")]

    def test_class_tokens_accumulate_in_first_seen_order(self):
        attributes = AttributeSet().add_class("btn").set("class", "btn-primary large").add_class("btn")
        assert attributes.get("class") == "btn btn-primary large"

    def test_repeated_configuration_has_no_duplicate_class_tokens(self):
        attributes = AttributeSet()
        for _ in range(3):
            attributes.add_class("card", "card-body")
            attributes.set("class", "card")
        assert attributes.classes == ("card", "card-body")
        assert attributes.render() == ' class="card card-body"'

    def test_empty_value_renders_as_boolean_attribute(self):
        assert AttributeSet().set("checked").render() == " checked"

    def test_values_are_attribute_encoded(self):
        attributes = AttributeSet().set("title", '"><script>alert(1)</script>')
        assert attributes.render() == ' title="&quot;&gt;&lt;script&gt;alert(1)&lt;/script&gt;"'

    def test_names_are_lowercased(self):
        attributes = AttributeSet().set("DATA-Id", "7")
        assert "data-id" in attributes
        assert attributes.get("data-id") == "7"

    def test_invalid_attribute_name_raises(self):
        with pytest.raises(InvalidInputError):
            AttributeSet().set("onclick=alert(1)", "x")

    def test_style_string_is_parsed_into_declarations(self):
        attributes = AttributeSet().set("style", "color: red; margin: 0")
        attributes.set_style("color", "blue")
        assert attributes.styles == (("color", "blue"), ("margin", "0"))
        assert attributes.render() == ' style="color: blue; margin: 0;"'

    def test_malformed_style_raises(self):
        with pytest.raises(InvalidInputError):
            AttributeSet().set("style", "color red")

    def test_frozen_set_rejects_mutation(self):
        frozen = AttributeSet().set("id", "x").freeze()
        with pytest.raises(RenderInvariantError):
            frozen.set("title", "y")
        with pytest.raises(RenderInvariantError):
            frozen.add_class("z")

    def test_freeze_copies_state(self):
        original = AttributeSet().add_class("a")
        frozen = original.freeze()
        original.add_class("b")
        assert frozen.classes == ("a",)
        assert len(frozen) == 1

    @pytest.mark.parametrize(
        "name,value",
        [
            ("href", "javascript:alert(1)"),
            ("HREF", "javascript:alert(1)"),
            ("action", "vbscript:msgbox(1)"),
            ("formaction", "javascript:void(0)"),
            ("hx-get", "javascript:alert(1)"),
            ("data-hx-post", "javascript:alert(1)"),
            ("src", "data:text/html,<b>x</b>"),
            ("id", "x').remove();alert('xss');//"),
        ],
    )
    def test_values_of_checked_names_are_validated(self, name, value):
        with pytest.raises(InvalidInputError) as excinfo:
            AttributeSet().set(name, value)
        assert excinfo.value.field == name.lower()

    def test_unchecked_names_store_any_value(self):
        attributes = AttributeSet().set("title", "javascript:alert(1)").set("hx-confirm", "Sure?")
        assert attributes.get("title") == "javascript:alert(1)"
        assert attributes.get("hx-confirm") == "Sure?"
