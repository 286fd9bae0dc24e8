"""Service Layer — imperative shell around the pure core.

Invariants:
    - Services receive a ProcedureExecutor; they never build engines or connections
    - Business rules live in core/, services only sequence IO around them
"""
