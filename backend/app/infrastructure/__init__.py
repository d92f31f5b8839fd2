"""Infrastructure Layer — persistence, authentication, and cross-cutting concerns.

Invariants:
    - Infrastructure implements core protocols; core never imports infrastructure
    - Storage and token library errors mapped to core/errors.py types

Design Decisions:
    - One module per collaborator: database, repositories, auth, observability
"""
