from dataclasses import dataclass
from typing import Optional

@dataclass
class DomainDTO:
    name: str
    state: str
    type: Optional[str] = None
    created_at: Optional[str] = None
    spam_action: Optional[str] = None
    smtp_login: Optional[str] = None
    wildcard: bool = False

    @property
    def is_active(self) -> bool:
        return self.state == "active"
