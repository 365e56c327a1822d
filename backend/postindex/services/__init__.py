"""Services Layer — post library lifecycle, reader sessions, and search debouncing.

Invariants:
    - Services orchestrate async IO around pure core functions
    - No service reaches into another session's QueryState
"""
