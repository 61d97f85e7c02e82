from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from .config import DEFAULT_CREDENTIALS
from .datamodels import Credential


class CredentialSource:
    """Fixed set of demo users, matched on exact email and password."""

    def __init__(self, records: Iterable[Credential]):
        self.records: List[Credential] = list(records)

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "CredentialSource":
        entries = config.get("credentials") or DEFAULT_CREDENTIALS
        return cls(
            Credential(email=e["email"], password=e["password"], name=e["name"])
            for e in entries
        )

    def lookup(self, email: str, password: str) -> Optional[Credential]:
        for record in self.records:
            if record.email == email and record.password == password:
                return record
        return None
