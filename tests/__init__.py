"""
Test Suite
==========

Test suite matching the pagecraft/ package structure.

Test Categories:
- unit: Unit tests for rendering, escaping and editing components
- integration: HTTP surface tests through the FastAPI test client
- security: Injection-defense tests
"""
