"""Infrastructure Layer — post source transport and cross-cutting concerns.

Invariants:
    - All external failures mapped to typed errors from core/errors.py
"""
