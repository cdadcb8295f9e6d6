from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class ServiceError(Exception):
    """Service-layer exception carrying the HTTP status and error envelope fields."""

    status_code: int
    code: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
            }
        }

    def __str__(self) -> str:  # pragma: no cover - convenience for logging
        return f"{self.status_code} {self.code}: {self.message} | {self.details}"
