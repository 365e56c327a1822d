"""Core Layer — pure post index logic, no IO, no async, no HTTP.

Invariants:
    - No module in core/ imports from services/, api/, or infrastructure/
    - All functions are pure and deterministic (QueryEngine mutates only its own QueryState)

Design Decisions:
    - Functional core separated from imperative shell: the shell loads posts and
      pushes results, the core only derives them
"""
