"""Query Compilation — turns untrusted list parameters into parameterized SQLAlchemy statements.

Invariants:
    - No module here performs IO; services execute what these modules build
    - Every user-supplied value reaches SQL through a bindparam, never through text
    - Compilers degrade to defaults on bad input; they never raise

Design Decisions:
    - Separate from core/: these modules reference ORM columns, core stays storage-free
"""
