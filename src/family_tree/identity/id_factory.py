# src/family_tree/identity/id_factory.py
from __future__ import annotations

import uuid
from typing import Callable, Container

IdFactory = Callable[[], str]

# Bounded so a broken factory fails loudly instead of spinning.
MAX_ID_ATTEMPTS = 32


def new_member_id() -> str:
    """Opaque, collision-resistant id for a freshly created member."""
    return str(uuid.uuid4())


def fresh_id(taken: Container[str], factory: IdFactory = new_member_id) -> str:
    """
    Draw ids from ``factory`` until one is not in ``taken``.
    """
    for _ in range(MAX_ID_ATTEMPTS):
        candidate = factory()
        if candidate and candidate not in taken:
            return candidate
    raise RuntimeError(f"Could not generate an unused member id after {MAX_ID_ATTEMPTS} attempts")


__all__ = [
    "IdFactory",
    "fresh_id",
    "new_member_id",
]
