from __future__ import annotations

import os
from dataclasses import dataclass

SIGNATURE_LIFETIME = 600

DEFAULT_SIGNATURE_PARAM = "signature"
DEFAULT_AUTH_USER_PARAM = "auth_user"
DEFAULT_VALID_UNTIL_PARAM = "valid_until"
DEFAULT_EXTRA_PARAM = "extra"
DEFAULT_VALUE_DUMPER = "default"


@dataclass(frozen=True)
class SignatureConfig:
    lifetime: int = SIGNATURE_LIFETIME
    signature_param: str = DEFAULT_SIGNATURE_PARAM
    auth_user_param: str = DEFAULT_AUTH_USER_PARAM
    valid_until_param: str = DEFAULT_VALID_UNTIL_PARAM
    extra_param: str = DEFAULT_EXTRA_PARAM
    value_dumper: str = DEFAULT_VALUE_DUMPER

    def param_names(self) -> tuple[str, str, str, str]:
        return (self.signature_param, self.auth_user_param, self.valid_until_param, self.extra_param)


def _parse_lifetime(value: str | None) -> int:
    if not value:
        return SIGNATURE_LIFETIME
    try:
        lifetime = int(value.strip())
    except ValueError as exc:
        raise ValueError(f"SIGNKEY_SIGNATURE_LIFETIME must be an integer, got {value!r}") from exc
    if lifetime < 0:
        raise ValueError("SIGNKEY_SIGNATURE_LIFETIME must be >= 0")
    return lifetime


def get_config() -> SignatureConfig:
    return SignatureConfig(
        lifetime=_parse_lifetime(os.getenv("SIGNKEY_SIGNATURE_LIFETIME")),
        signature_param=os.getenv("SIGNKEY_SIGNATURE_PARAM", DEFAULT_SIGNATURE_PARAM),
        auth_user_param=os.getenv("SIGNKEY_AUTH_USER_PARAM", DEFAULT_AUTH_USER_PARAM),
        valid_until_param=os.getenv("SIGNKEY_VALID_UNTIL_PARAM", DEFAULT_VALID_UNTIL_PARAM),
        extra_param=os.getenv("SIGNKEY_EXTRA_PARAM", DEFAULT_EXTRA_PARAM),
        value_dumper=os.getenv("SIGNKEY_VALUE_DUMPER", DEFAULT_VALUE_DUMPER),
    )
