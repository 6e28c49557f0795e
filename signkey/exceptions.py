from __future__ import annotations

from typing import Any, Tuple


class SignKeyError(Exception):
    pass


class InvalidTimestampError(SignKeyError, ValueError):
    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"invalid valid_until timestamp: {value!r}")


class ValidationFailed(SignKeyError):
    def __init__(self, result: Any):
        self.result = result
        self.errors: Tuple[str, ...] = tuple(getattr(result, "errors", ()))
        msg = "signature validation failed"
        if self.errors:
            msg += ": " + ", ".join(self.errors)
        super().__init__(msg)
