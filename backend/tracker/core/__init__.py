"""Core Layer — pure query compilation and integrity rules, no IO, no async.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Compilers are deterministic: same input, same plan

Design Decisions:
    - Functional core separated from imperative shell: services execute what core compiles
"""
