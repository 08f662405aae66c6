"""
Test Utilities
==============

Common assertions and data builders for testing.
"""

from .assertions import *
from .data_generators import *
