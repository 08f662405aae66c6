"""
Security Tests for Markup Injection
===================================

User-controlled text, ids, URLs and styles must never reach the browser as markup.
"""

import pytest

from pagecraft.core.rendering.components import link
from pagecraft.core.rendering.escaping import InvalidInputError
from pagecraft.core.rendering.nodes import Tag, tag

from tests.utils.assertions import (
    assert_error_response,
    assert_no_raw_markup,
    assert_two_fragment_page_response,
    oob_fragments,
)
from tests.utils.data_generators import PayloadGenerator


@pytest.mark.security
class TestRenderTreeBoundary:
    """Test the encoding boundary of the render tree."""

    @pytest.mark.parametrize("payload", PayloadGenerator.SCRIPT_TEXT)
    def test_text_payloads_are_encoded(self, payload):
        html = Tag("div").text(payload).render()
        assert_no_raw_markup(html, payload)
        assert "<" not in html[len("<div>"):-len("</div>")]

    @pytest.mark.parametrize("payload", PayloadGenerator.SCRIPT_TEXT)
    def test_attribute_payloads_stay_inside_quotes(self, payload):
        html = Tag("input").attr("value", payload).render()
        assert html.count('"') == 2

    @pytest.mark.parametrize("url", PayloadGenerator.BAD_URLS)
    def test_dangerous_urls_are_rejected(self, url):
        with pytest.raises(InvalidInputError):
            link("click", url)
        with pytest.raises(InvalidInputError):
            Tag("button").hx("get", url)

    @pytest.mark.parametrize("value", PayloadGenerator.BAD_CSS_LENGTHS)
    def test_css_injection_is_rejected(self, value):
        with pytest.raises(InvalidInputError):
            Tag("div").width(value)

    @pytest.mark.parametrize("value", PayloadGenerator.BAD_IDS)
    def test_unsafe_ids_are_rejected(self, value):
        with pytest.raises(InvalidInputError):
            Tag("div").id(value)

    @pytest.mark.parametrize("url", PayloadGenerator.BAD_URLS)
    def test_generic_setters_reject_dangerous_urls(self, url):
        with pytest.raises(InvalidInputError):
            Tag("a").attr("href", url)
        with pytest.raises(InvalidInputError):
            Tag("form").attrs(action=url)
        with pytest.raises(InvalidInputError):
            Tag("button").attrs(hx_delete=url)
        with pytest.raises(InvalidInputError):
            Tag("img").attr("src", url)

    @pytest.mark.parametrize("url", PayloadGenerator.BAD_URLS)
    def test_tag_shorthand_rejects_dangerous_urls(self, url):
        with pytest.raises(InvalidInputError):
            tag("a", "x", href=url)
        with pytest.raises(InvalidInputError):
            tag("button", "Go", hx_post=url)

    def test_javascript_link_never_renders(self):
        with pytest.raises(InvalidInputError) as excinfo:
            tag("a", "x", href="javascript:alert(1)").render()
        assert excinfo.value.field == "href"

    @pytest.mark.parametrize("value", PayloadGenerator.BAD_IDS)
    def test_generic_setters_reject_unsafe_ids(self, value):
        with pytest.raises(InvalidInputError):
            Tag("div").attr("id", value)
        with pytest.raises(InvalidInputError):
            tag("div", id=value)

    def test_generic_setters_accept_safe_values(self):
        html = tag("a", "Docs", href="/docs", id="docs-link", hx_get="/page?user=bob").render()
        assert html == '<a href="/docs" id="docs-link" hx-get="/page?user=bob">Docs</a>'
        assert Tag("img").attr("src", "data:image/png;base64,AAAA").render().startswith('<img src="data:image/png')


@pytest.mark.security
class TestEndpointInjection:
    """Test injection attempts through the HTTP endpoints."""

    def test_script_in_path_id_is_rejected_before_rendering(self, client):
        response = client.get("/edit/x').remove();alert('xss');")
        assert response.status_code == 400
        payload = response.json()
        assert_error_response(payload, "INVALID_INPUT")
        assert "hx-swap-oob" not in response.text

    def test_script_in_mutation_path_is_rejected(self, client, services):
        response = client.post("/add-child/x').remove();alert('xss');", data={"text": "x"})
        assert response.status_code == 400
        assert len(services.store.get("module-9").items) == 3

    @pytest.mark.parametrize("payload", PayloadGenerator.SCRIPT_TEXT)
    def test_item_text_is_encoded(self, client, payload):
        response = client.post("/add-child/module-9", data={"text": payload})
        page = assert_two_fragment_page_response(response.text)
        assert_no_raw_markup(page.inner_html, payload.strip())

    @pytest.mark.parametrize("payload", PayloadGenerator.SCRIPT_TEXT)
    def test_module_title_is_encoded(self, client, payload):
        response = client.post(
            "/save/module-2", data={"title": payload, "content": "Body", "user": "admin"}
        )
        page = assert_two_fragment_page_response(response.text)
        assert_no_raw_markup(page.inner_html, payload)

    def test_markdown_content_is_sanitized(self, client):
        content = "\n\n".join(PayloadGenerator.SCRIPT_TEXT + ["[x](javascript:alert(1))"])
        response = client.post(
            "/save/module-1",
            data={"title": "Notes", "content": content, "useMarkdown": "on", "user": "alice"},
        )
        page = assert_two_fragment_page_response(response.text)
        assert "<script" not in page.inner_html
        assert "<svg" not in page.inner_html
        assert 'href="javascript:' not in page.inner_html

    def test_payload_in_invalid_form_is_encoded(self, client):
        payload = PayloadGenerator.SCRIPT_TEXT[3]
        response = client.post("/save/module-2", data={"title": "", "content": payload})
        fragments = oob_fragments(response.text)
        assert len(fragments) == 1
        assert_no_raw_markup(fragments[0].inner_html, payload)

    def test_user_query_is_encoded_in_urls(self, client):
        response = client.get("/page", params={"user": '"><script>alert(1)</script>'})
        assert "<script>" not in response.text
        assert "%22%3E%3Cscript%3E" in response.text
