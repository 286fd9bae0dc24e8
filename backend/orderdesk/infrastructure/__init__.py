"""Infrastructure Layer — database gateway and cross-cutting concerns.

Invariants:
    - Infrastructure never imports domain logic beyond core types and errors
    - All driver failures mapped to core/errors.py types

Design Decisions:
    - Gateway implements core.repository_protocols.ProcedureExecutor structurally
"""
