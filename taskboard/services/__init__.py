"""Services Layer — async orchestration around the pure core.

Invariants:
    - Services load rows, hand snapshots to core/, and write results back
    - Every board-scoped operation passes through board_access before touching data

Design Decisions:
    - One service module per component for locality
"""
