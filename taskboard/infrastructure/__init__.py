"""Infrastructure Layer — database, logging and outbound notification.

Invariants:
    - Infrastructure never imports core decision logic, only core errors/protocols
    - All external calls mapped to typed errors or explicitly swallowed by the caller
"""
