"""
Storage
=======

Module record storage consumed by the edit handlers.
"""
