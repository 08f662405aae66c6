"""
Unit Tests for the Escaping Boundary
====================================

Text and attribute encoding, URL allow-listing, CSS grammar and id validation.
"""

import pytest

from pagecraft.core.rendering.escaping import (
    InvalidInputError,
    encode_attribute,
    encode_text,
    is_safe_url,
    validate_attribute_name,
    validate_css_length,
    validate_dom_id,
    validate_image_url,
    validate_style_declaration,
    validate_tag_name,
    validate_url,
)

from tests.utils.data_generators import PayloadGenerator


class TestEncoding:
    """Test text and attribute encoding."""

    def test_encode_text_replaces_markup_characters(self):
        assert encode_text("<a href=\"x\">Tom & 'Jerry'</a>") == (
            "&lt;a href=&quot;x&quot;&gt;Tom &amp; &#x27;Jerry&#x27;&lt;/a&gt;"
        )

    def test_encode_text_is_not_idempotent_on_entities(self):
        """Already-encoded input is encoded again rather than trusted."""
        assert encode_text("&lt;") == "&amp;lt;"

    def test_encode_attribute_handles_backtick(self):
        assert encode_attribute("`x`") == "&#x60;x&#x60;"

    @pytest.mark.parametrize("payload", PayloadGenerator.SCRIPT_TEXT)
    def test_encoded_payloads_contain_no_angle_brackets(self, payload):
        assert "<" not in encode_text(payload)
        assert ">" not in encode_text(payload)
        assert '"' not in encode_attribute(payload)


class TestUrlValidation:
    """Test URL scheme allow-listing."""

    @pytest.mark.parametrize(
        "url",
        [
            "https://example.com/page?q=1",
            "http://example.com",
            "mailto:someone@example.com",
            "tel:+15551234",
            "/relative/path",
            "./here",
            "../up",
            "#anchor",
            "?query=1",
            "//cdn.example.com/lib.js",
            "plain/path:with-colon",
            "",
        ],
    )
    def test_allowed_urls_are_returned_unchanged(self, url):
        assert validate_url(url) == url
        assert is_safe_url(url)

    @pytest.mark.parametrize("url", PayloadGenerator.BAD_URLS)
    def test_disallowed_schemes_raise(self, url):
        with pytest.raises(InvalidInputError) as exc_info:
            validate_url(url, "href")
        assert exc_info.value.field == "href"
        assert not is_safe_url(url)

    def test_image_data_urls_are_accepted_for_src(self):
        url = "data:image/png;base64,iVBORw0KGgo="
        assert validate_image_url(url) == url

    def test_non_image_data_urls_are_rejected_for_src(self):
        with pytest.raises(InvalidInputError):
            validate_image_url("data:text/html;base64,PHNjcmlwdD4=")

    def test_image_src_still_rejects_javascript(self):
        with pytest.raises(InvalidInputError):
            validate_image_url("javascript:alert(1)")


class TestCssValidation:
    """Test the constrained CSS value grammar."""

    @pytest.mark.parametrize("value", ["300px", "50%", "1.5rem", "2em", "100vw", "80vh", "auto", "0"])
    def test_conforming_lengths_are_accepted_unchanged(self, value):
        assert validate_css_length(value) == value

    @pytest.mark.parametrize("value", PayloadGenerator.BAD_CSS_LENGTHS)
    def test_lengths_outside_grammar_raise(self, value):
        with pytest.raises(InvalidInputError):
            validate_css_length(value, "width")

    def test_trailing_newline_is_rejected(self):
        with pytest.raises(InvalidInputError):
            validate_css_length("10px\n")

    def test_style_declaration_rejects_breakout_characters(self):
        with pytest.raises(InvalidInputError):
            validate_style_declaration("color", "red; background: url(x)")
        with pytest.raises(InvalidInputError):
            validate_style_declaration("Color!", "red")

    def test_style_declaration_accepts_plain_values(self):
        validate_style_declaration("color", "#333")
        validate_style_declaration("-webkit-line-clamp", "3")


class TestNameValidation:
    """Test DOM id, attribute name and tag name validation."""

    @pytest.mark.parametrize("value", ["module-1", "edit_modal", "A9"])
    def test_valid_dom_ids(self, value):
        assert validate_dom_id(value) == value

    @pytest.mark.parametrize("value", PayloadGenerator.BAD_IDS)
    def test_invalid_dom_ids(self, value):
        with pytest.raises(InvalidInputError) as exc_info:
            validate_dom_id(value, "module id")
        assert exc_info.value.field == "module id"

    def test_dom_id_rejects_trailing_newline(self):
        with pytest.raises(InvalidInputError):
            validate_dom_id("module-1\n")

    def test_invalid_input_error_is_value_error(self):
        assert issubclass(InvalidInputError, ValueError)

    @pytest.mark.parametrize("name", ["data-id", "hx-post", "aria-label", "xml:lang"])
    def test_valid_attribute_names(self, name):
        assert validate_attribute_name(name) == name

    @pytest.mark.parametrize("name", ["on click", "a\"b", "x=y", "", "1abc", "a>b"])
    def test_invalid_attribute_names(self, name):
        with pytest.raises(InvalidInputError):
            validate_attribute_name(name)

    def test_tag_names(self):
        assert validate_tag_name("custom-element") == "custom-element"
        with pytest.raises(InvalidInputError):
            validate_tag_name("div onclick")
