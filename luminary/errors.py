from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class LuminaryError(Exception):
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class UnknownShowError(LuminaryError):
    def __init__(self, show_id: str):
        super().__init__(
            code="unknown_show",
            message=f"Unknown show: {show_id}",
            details={"show_id": show_id},
        )


class ConfigError(LuminaryError):
    def __init__(self, show_id: str, errors: Any):
        super().__init__(
            code="invalid_config",
            message=f"Invalid configuration for show '{show_id}'",
            details={"show_id": show_id, "errors": errors},
        )


class InvalidColorError(LuminaryError):
    """Out-of-range hue/saturation/brightness presented to a controller."""

    def __init__(self, hue: float, saturation: float, brightness: float):
        super().__init__(
            code="invalid_color",
            message=f"Color out of range: hue={hue} saturation={saturation} brightness={brightness}",
            details={"hue": hue, "saturation": saturation, "brightness": brightness},
        )


class WriteFailure(LuminaryError):
    """A controller write returned failure, raised or timed out.

    Never raised through a show loop: the write coordinator records the last
    failure per endpoint and keeps going.
    """

    def __init__(self, endpoint_id: str, reason: str):
        super().__init__(
            code="write_failed",
            message=f"Write to '{endpoint_id}' failed: {reason}",
            details={"endpoint_id": endpoint_id, "reason": reason},
        )
