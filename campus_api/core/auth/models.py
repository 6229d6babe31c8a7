from __future__ import annotations

from dataclasses import dataclass
from typing import List


def normalize_role(role: str) -> str:
    """'role_admin', 'ROLE_ADMIN' and 'admin' all mean ADMIN."""
    r = (role or "").strip().upper()
    if r.startswith("ROLE_"):
        r = r[len("ROLE_"):]
    return r


@dataclass(frozen=True)
class Principal:
    subject: str
    roles: List[str]

    def normalized_roles(self) -> List[str]:
        return sorted({normalize_role(r) for r in (self.roles or []) if r})

