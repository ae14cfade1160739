"""
Domain Services Package

Architectural Intent:
- Stateless domain logic that does not belong to a single entity
"""

from tidemark.domain.services.active_resolver import resolve_active

__all__ = ["resolve_active"]
