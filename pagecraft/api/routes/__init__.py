"""
API Routes
==========

Routers grouped by concern: page editing, generic module endpoints,
review queue and health.
"""
