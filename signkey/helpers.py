from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from .config import (
    DEFAULT_AUTH_USER_PARAM,
    DEFAULT_EXTRA_PARAM,
    DEFAULT_SIGNATURE_PARAM,
    DEFAULT_VALID_UNTIL_PARAM,
    SIGNATURE_LIFETIME,
    SignatureConfig,
)
from .core import (
    SecretKey,
    Signature,
    SignatureValidationResult,
    Timestamp,
    ValueDumper,
    generate_signature,
    validate_signature,
)
from .exceptions import InvalidTimestampError, ValidationFailed

logger = logging.getLogger("signkey")


def dict_keys(data: Mapping[str, Any], return_string: bool = False) -> Union[str, List[str]]:
    keys = sorted(str(k) for k in data.keys())
    if return_string:
        return ",".join(keys)
    return keys


def extract_signed_data(data: Mapping[str, Any], extra: Iterable[str]) -> Dict[str, Any]:
    allowed = set(extra)
    return {k: v for k, v in data.items() if k in allowed}


class RequestHelper:
    def __init__(
        self,
        signature_param: str = DEFAULT_SIGNATURE_PARAM,
        auth_user_param: str = DEFAULT_AUTH_USER_PARAM,
        valid_until_param: str = DEFAULT_VALID_UNTIL_PARAM,
        extra_param: str = DEFAULT_EXTRA_PARAM,
    ):
        self.signature_param = signature_param
        self.auth_user_param = auth_user_param
        self.valid_until_param = valid_until_param
        self.extra_param = extra_param

    @classmethod
    def from_config(cls, config: SignatureConfig) -> "RequestHelper":
        return cls(*config.param_names())

    @property
    def reserved_params(self) -> tuple[str, str, str, str]:
        return (self.signature_param, self.auth_user_param, self.valid_until_param, self.extra_param)

    def signature_to_dict(self, signature: Signature) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            self.signature_param: signature.signature,
            self.auth_user_param: signature.auth_user,
            self.valid_until_param: signature.valid_until,
            self.extra_param: dict_keys(signature.extra, return_string=True),
        }
        # extra is merged last; a colliding extra key overwrites the reserved one.
        data.update((str(k), v) for k, v in signature.extra.items())
        return data

    def extract_extra(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        keys = data.get(self.extra_param) or ""
        if not keys:
            return {}
        return extract_signed_data(data, str(keys).split(","))

    def validate_request_data(
        self,
        data: Mapping[str, Any],
        secret_key: SecretKey,
        value_dumper: Union[str, ValueDumper, None] = None,
        now: Optional[float] = None,
    ) -> SignatureValidationResult:
        return validate_signature(
            signature=data.get(self.signature_param) or "",
            auth_user=str(data.get(self.auth_user_param) or ""),
            secret_key=secret_key,
            valid_until=str(data.get(self.valid_until_param) or ""),
            extra=self.extract_extra(data),
            return_object=True,
            value_dumper=value_dumper,
            now=now,
        )


def signature_to_dict(
    auth_user: str,
    secret_key: SecretKey,
    extra: Optional[Mapping[str, Any]] = None,
    valid_until: Optional[Timestamp] = None,
    lifetime: int = SIGNATURE_LIFETIME,
    signature_param: str = DEFAULT_SIGNATURE_PARAM,
    auth_user_param: str = DEFAULT_AUTH_USER_PARAM,
    valid_until_param: str = DEFAULT_VALID_UNTIL_PARAM,
    extra_param: str = DEFAULT_EXTRA_PARAM,
    value_dumper: Union[str, ValueDumper, None] = None,
    now: Optional[float] = None,
) -> Dict[str, Any]:
    signature = generate_signature(
        auth_user,
        secret_key,
        valid_until=valid_until,
        lifetime=lifetime,
        extra=extra,
        value_dumper=value_dumper,
        now=now,
    )
    if signature is None:
        raise InvalidTimestampError(valid_until)

    helper = RequestHelper(signature_param, auth_user_param, valid_until_param, extra_param)
    return helper.signature_to_dict(signature)


def validate_signed_request_data(
    data: Mapping[str, Any],
    secret_key: SecretKey,
    signature_param: str = DEFAULT_SIGNATURE_PARAM,
    auth_user_param: str = DEFAULT_AUTH_USER_PARAM,
    valid_until_param: str = DEFAULT_VALID_UNTIL_PARAM,
    extra_param: str = DEFAULT_EXTRA_PARAM,
    validate: bool = False,
    fail_silently: bool = False,
    value_dumper: Union[str, ValueDumper, None] = None,
    now: Optional[float] = None,
) -> SignatureValidationResult:
    helper = RequestHelper(signature_param, auth_user_param, valid_until_param, extra_param)
    result = helper.validate_request_data(data, secret_key, value_dumper=value_dumper, now=now)
    if validate and not result.ok:
        if fail_silently:
            logger.info("signed request rejected: %s", result.reason)
        else:
            raise ValidationFailed(result)
    return result
