"""Service Layer — engine operations over an injected DatabaseSessionManager.

Invariants:
    - Services never import from api/
    - Every mutation is one transaction: all statements commit or none do
    - Reads that do not depend on each other run concurrently, one session each

Design Decisions:
    - Constructor injection (session manager, optional logger): no process-wide state,
      so tests build services against a throwaway database
"""
