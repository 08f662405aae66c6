"""
FastAPI HTML Endpoints
======================

HTTP surface returning text/html fragments for htmx clients.
"""
