"""
pagecraft
=========

Server-side HTML component rendering with in-place page patching.

This package provides:
- An immutable component render tree with a fluent builder API
- An escaping and injection-defense boundary for every output sink
- A module edit state machine with owner and review-queue edit modes
- An htmx out-of-band response assembler for multi-target updates
- FastAPI endpoints serving HTML fragments
"""

__version__ = "1.0.0"
__author__ = "pagecraft team"
