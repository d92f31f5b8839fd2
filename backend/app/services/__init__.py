"""Services Layer — imperative shell around the pure core.

Invariants:
    - Services talk to storage only through core/repository_protocols.py
    - Business rules live in core/; services sequence IO around them

Design Decisions:
    - One file per use-case group for locality (ADR: no god objects)
"""
