"""
Data Models
===========

Pydantic models shared by the storage layer, the editing core and the HTTP surface.
"""
