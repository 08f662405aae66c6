"""
Unit Tests for Out-of-Band Responses
====================================
"""

import pytest

from pagecraft.core.editing.oob import (
    OobResponse,
    OobTarget,
    SwapDirective,
    modal_response,
    module_container_class,
    module_refresh_response,
    page_refresh_response,
)
from pagecraft.core.rendering.components import div
from pagecraft.core.rendering.escaping import InvalidInputError
from pagecraft.core.rendering.nodes import EMPTY, Tag

from tests.utils.assertions import (
    assert_two_fragment_module_response,
    assert_two_fragment_page_response,
    oob_fragments,
)


class TestOobTarget:
    """Test target addressing."""

    def test_selectors(self):
        assert OobTarget.by_id("page-content").selector == "#page-content"
        assert OobTarget.by_class("module-1-container").selector == ".module-1-container"

    @pytest.mark.parametrize("value", ["x').remove();alert('xss');//", "a b", "#page"])
    def test_targets_are_validated(self, value):
        with pytest.raises(InvalidInputError):
            OobTarget.by_id(value)
        with pytest.raises(InvalidInputError):
            OobTarget.by_class(value)

    def test_module_container_class(self):
        assert module_container_class("module-1") == "module-1-container"
        with pytest.raises(InvalidInputError):
            module_container_class("module 1")


class TestOobResponse:
    """Test response assembly."""

    def test_wrapper_attribute_order(self):
        html = OobResponse().add(OobTarget.by_id("target"), SwapDirective.INNER_HTML, "hi").render()
        assert html == '<div hx-swap-oob="innerHTML" id="target">hi</div>'

    def test_primary_then_fragments_in_insertion_order(self):
        response = (
            OobResponse(Tag("p").text("primary"))
            .add(OobTarget.by_id("a"), SwapDirective.TRUE, "1")
            .add(OobTarget.by_class("b"), SwapDirective.OUTER_HTML, div("2"))
        )
        assert response.render() == (
            "<p>primary</p>"
            '<div hx-swap-oob="true" id="a">1</div>'
            '<div hx-swap-oob="outerHTML" class="b"><div>2</div></div>'
        )
        assert [fragment.target.selector for fragment in response.fragments] == ["#a", ".b"]

    def test_identical_inputs_yield_identical_bytes(self):
        def build():
            return OobResponse().add(OobTarget.by_id("a"), SwapDirective.TRUE, div("<x>", cls="c"))

        assert build().render() == build().render()
        response = build()
        assert response.render() == response.render()

    def test_fragment_content_is_escaped(self):
        html = OobResponse().add(OobTarget.by_id("a"), SwapDirective.TRUE, "<script>").render()
        assert "<script>" not in html

    def test_string_swap_directive_is_normalized(self):
        response = OobResponse().add(OobTarget.by_id("a"), "outerHTML", EMPTY)
        assert response.fragments[0].swap is SwapDirective.OUTER_HTML

    def test_invalid_swap_directive_raises(self):
        with pytest.raises(ValueError):
            OobResponse().add(OobTarget.by_id("a"), "beforeend", EMPTY)

    def test_added_builders_are_snapshotted(self):
        builder = div("before")
        response = OobResponse().add(OobTarget.by_id("a"), SwapDirective.TRUE, builder)
        builder.text("after")
        assert "after" not in response.render()


class TestResponseShapes:
    """Test the two-fragment mutation responses."""

    def test_page_refresh_shape(self):
        html = page_refresh_response("edit-modal-container", "page-content", div("page")).render()
        page = assert_two_fragment_page_response(html)
        assert page.inner_html == "<div>page</div>"

    def test_modal_close_fragment_is_exact(self):
        html = page_refresh_response("edit-modal-container", "page-content", EMPTY).render()
        assert html.startswith('<div hx-swap-oob="true" id="edit-modal-container"></div>')

    def test_module_refresh_shape(self):
        html = module_refresh_response("edit-modal-container", "module-1", div("view")).render()
        fragment = assert_two_fragment_module_response(html, "module-1")
        assert fragment.inner_html == "<div>view</div>"

    def test_modal_response_keeps_modal_open(self):
        html = modal_response("edit-modal-container", div("form")).render()
        fragments = oob_fragments(html)
        assert len(fragments) == 1
        assert fragments[0].attribute_map["id"] == "edit-modal-container"
        assert fragments[0].inner_html == "<div>form</div>"

    def test_invalid_module_id_fails_before_any_fragment(self):
        with pytest.raises(InvalidInputError):
            module_refresh_response("edit-modal-container", "x').remove();alert('xss');//", div("view"))
