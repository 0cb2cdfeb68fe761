"""
Core domain models, encoding and digest primitives.

This module contains the foundational building blocks that are independent
of external systems (networks, key stores, etc.).
"""
