"""
Test Data Generators
====================

Module records and injection payloads for testing scenarios.
"""

from typing import List, Optional

from pagecraft.models.schemas import EditMode, ItemRecord, ModuleKind, ModuleRecord


class ModuleDataGenerator:
    """Generate module records."""

    @staticmethod
    def content_module(
        module_id: str = "module-1",
        title: str = "Welcome",
        content: str = "Hello world",
        edit_mode: EditMode = EditMode.OWNER_EDIT,
        owner: Optional[str] = None,
        use_markdown: bool = False,
    ) -> ModuleRecord:
        return ModuleRecord(
            module_id=module_id,
            kind=ModuleKind.CONTENT,
            title=title,
            content=content,
            use_markdown=use_markdown,
            edit_mode=edit_mode,
            owner=owner,
        )

    @staticmethod
    def list_module(
        module_id: str = "module-9",
        title: str = "Task List",
        texts: Optional[List[str]] = None,
        edit_mode: EditMode = EditMode.OWNER_EDIT,
        owner: Optional[str] = None,
    ) -> ModuleRecord:
        texts = ["First", "Second"] if texts is None else texts
        return ModuleRecord(
            module_id=module_id,
            kind=ModuleKind.LIST,
            title=title,
            items=[ItemRecord(id=f"item-{index}", text=text) for index, text in enumerate(texts)],
            next_item_number=len(texts),
            edit_mode=edit_mode,
            owner=owner,
        )


class PayloadGenerator:
    """Injection payloads used by the security tests."""

    SCRIPT_TEXT = [
        "<script>alert('xss')</script>",
        "\"><img src=x onerror=alert(1)>",
        "'><svg onload=alert(1)>",
        "</textarea><script>alert(1)</script>",
    ]

    BAD_IDS = [
        "x').remove();alert('xss');",
        "module 1",
        "module\"1",
        "<b>",
        "a.b",
        "a#b",
        "",
    ]

    BAD_URLS = [
        "javascript:alert(1)",
        "JAVASCRIPT:alert(1)",
        " javascript:alert(1)",
        "java\tscript:alert(1)",
        "vbscript:msgbox(1)",
        "data:text/html,<script>alert(1)</script>",
    ]

    BAD_CSS_LENGTHS = [
        "100px; background: url(x)",
        "expression(alert(1))",
        "10pt",
        "calc(100% - 1px)",
        "1e3px",
    ]
