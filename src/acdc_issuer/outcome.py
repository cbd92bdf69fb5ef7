"""
Result of the latest operator action (schema import or credential issuance).

An outcome is replaced wholesale on each new attempt; nothing accumulates.
"""

from __future__ import annotations

import dataclasses
from typing import Any, Dict, Optional


@dataclasses.dataclass(frozen=True)
class IssuanceOutcome:
    success: bool
    message: str
    data: Any = None
    kind: Optional[str] = None  # error class on failure, e.g. "http_failure"

    @classmethod
    def succeeded(cls, message: str, data: Any = None) -> "IssuanceOutcome":
        return cls(success=True, message=message, data=data)

    @classmethod
    def failed(cls, message: str, kind: Optional[str] = None) -> "IssuanceOutcome":
        return cls(success=False, message=message, kind=kind)

    def to_serialisable(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"success": self.success, "message": self.message}
        if self.success:
            payload["data"] = self.data
        return payload
