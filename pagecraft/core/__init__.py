"""
Core Business Logic
==================

Core modules for component rendering and module editing.

Modules:
- rendering: render tree, escaping boundary, markdown sandbox and page shell
- editing: edit state machine, edit handlers, modals and out-of-band responses
- storage: module record store used by the edit handlers
"""
