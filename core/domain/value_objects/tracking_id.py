"""Tracking ID value object."""
import re
import secrets
import string
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


_ALPHABET = string.ascii_uppercase + string.digits
_SUFFIX_LENGTH = 6
_PATTERN = re.compile(r"^[A-Z0-9]{1,10}-\d{8}-[A-Z0-9]{6}$")


@dataclass(frozen=True)
class TrackingId:
    """
    Short human-readable order code used for public status lookup.

    Format: PREFIX-YYYYMMDD-XXXXXX
    Examples:
    - GF-20260119-7KQ2ZD
    - GF-20251203-A00F9X
    """
    value: str

    def __post_init__(self):
        if not self.value:
            raise ValueError("Tracking ID cannot be empty")

        if not _PATTERN.match(self.value):
            raise ValueError(
                f"Invalid tracking ID format (expected PREFIX-YYYYMMDD-XXXXXX): {self.value}"
            )

    @classmethod
    def generate(cls, prefix: str = "GF", now: Optional[datetime] = None) -> "TrackingId":
        """Generate a fresh tracking ID for an order placed at ``now``."""
        now = now or datetime.utcnow()
        suffix = "".join(secrets.choice(_ALPHABET) for _ in range(_SUFFIX_LENGTH))
        return cls(value=f"{prefix.upper()}-{now:%Y%m%d}-{suffix}")

    def __str__(self) -> str:
        return self.value
