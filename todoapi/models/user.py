from dataclasses import dataclass, field
from typing import List

from todoapi.models.auth import TokenEntry


@dataclass
class User:
    id: str
    email: str
    password_hash: str
    tokens: List[TokenEntry] = field(default_factory=list)

    def has_token(self, token: str) -> bool:
        return any(entry.token == token for entry in self.tokens)
