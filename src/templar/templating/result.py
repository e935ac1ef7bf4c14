"""
Render outcome delivered to continuation callbacks.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RenderResult:
    """Either rendered output bytes or the failure that prevented them."""
    value: Optional[bytes] = None
    error: Optional[BaseException] = None

    def __post_init__(self):
        if (self.value is None) == (self.error is None):
            raise ValueError("RenderResult needs exactly one of value or error")

    @classmethod
    def success(cls, value: bytes) -> 'RenderResult':
        return cls(value=value)

    @classmethod
    def failure(cls, error: BaseException) -> 'RenderResult':
        return cls(error=error)

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def failed(self) -> bool:
        return self.error is not None

    def unwrap(self) -> bytes:
        """Return the output, or raise the failure"""
        if self.error is not None:
            raise self.error
        return self.value
