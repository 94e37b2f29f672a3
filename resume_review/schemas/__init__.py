"""
Pydantic schema package.

Domain-specific schema modules live here, e.g.:
- analysis.py
"""
