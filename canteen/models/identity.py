from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class Identity:
    """The signed-in user as seen by the order core (a value copy, not a live record)."""
    id: str
    name: str
    email: str
    role: str

    def claims(self) -> Dict[str, Any]:
        return {'name': self.name, 'email': self.email, 'role': self.role}

    @classmethod
    def from_user(cls, user: Dict[str, Any]) -> 'Identity':
        return cls(id=user['id'], name=user['name'], email=user['email'], role=user['role'])
