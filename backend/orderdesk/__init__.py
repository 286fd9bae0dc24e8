"""orderdesk — invoice and order API over SQL Server stored procedures.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
