"""Canonical encoding, HMAC signing and validation of signed payloads.

The signed base string is::

    {valid_until}_{auth_user}[_{sorted_urlencode(extra)}]

``valid_until`` is always the one-decimal fixed point text form, so signer and
verifier hash the same bytes regardless of host locale.

Scalars outside compound values dump as text: ``None`` as ``""`` and booleans
as ``true``/``false``. PHP signers concatenate booleans as ``1``/``""``, so
send booleans as strings when signatures must match such a peer. ``Decimal``
values inside mappings or lists are written as JSON numbers.
"""
from __future__ import annotations

import base64
import hashlib
import hmac
import json
import logging
import time
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union
from urllib.parse import quote

from .config import SIGNATURE_LIFETIME
from .exceptions import InvalidTimestampError

logger = logging.getLogger("signkey")

ValueDumper = Callable[[Any], str]
SecretKey = Union[str, bytes]
Timestamp = Union[str, int, float, Decimal]

_ONE_DECIMAL = Decimal("0.1")

# rawurlencode, then ! * ' ( ) reverted to literals.
_URI_COMPONENT_SAFE = "!*'()"


def encode_uri_component(value: str) -> str:
    return quote(value, safe=_URI_COMPONENT_SAFE, encoding="utf-8")


def dict_to_ordered_dict(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {str(k): dict_to_ordered_dict(v) for k, v in sorted(value.items(), key=lambda kv: str(kv[0]))}
    if isinstance(value, (list, tuple)):
        return [dict_to_ordered_dict(v) for v in value]
    return value


def _json_default(obj: Any) -> Any:
    if isinstance(obj, Decimal):
        return int(obj) if obj == obj.to_integral_value() else float(obj)
    return str(obj)


def _compact_json(obj: Any) -> str:
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=True, default=_json_default)


def _dump_scalar(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return repr(value)
    return str(value)


def _empty_mappings_as_lists(value: Any) -> Any:
    if isinstance(value, Mapping):
        if not value:
            return []
        return {k: _empty_mappings_as_lists(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_empty_mappings_as_lists(v) for v in value]
    return value


def default_value_dumper(value: Any) -> str:
    # Empty mappings render as [] to agree with signers that can't tell an
    # empty map from an empty list.
    if isinstance(value, (Mapping, list, tuple)):
        return _compact_json(_empty_mappings_as_lists(value))
    return _dump_scalar(value)


def javascript_value_dumper(value: Any) -> str:
    if isinstance(value, (Mapping, list, tuple)):
        return _compact_json(value)
    return _dump_scalar(value)


VALUE_DUMPERS: Dict[str, ValueDumper] = {
    "default": default_value_dumper,
    "javascript": javascript_value_dumper,
}


def get_value_dumper(value_dumper: Union[str, ValueDumper, None] = None) -> ValueDumper:
    if value_dumper is None:
        return default_value_dumper
    if callable(value_dumper):
        return value_dumper
    try:
        return VALUE_DUMPERS[value_dumper]
    except KeyError:
        raise ValueError(f"unknown value dumper: {value_dumper!r}") from None


def sorted_urlencode(data: Mapping[str, Any], quoted: bool = True, value_dumper: Union[str, ValueDumper, None] = None) -> str:
    dump = get_value_dumper(value_dumper)
    ordered = dict_to_ordered_dict(data)
    res = "&".join(f"{key}={dump(value)}" for key, value in ordered.items())
    if quoted:
        res = encode_uri_component(res)
    return res


def _to_decimal(value: Timestamp) -> Decimal:
    if isinstance(value, bool):
        raise InvalidTimestampError(value)
    if isinstance(value, Decimal):
        dec = value
    elif isinstance(value, int):
        dec = Decimal(value)
    elif isinstance(value, float):
        dec = Decimal(repr(value))
    elif isinstance(value, str):
        try:
            dec = Decimal(value.strip())
        except InvalidOperation:
            raise InvalidTimestampError(value) from None
    else:
        raise InvalidTimestampError(value)
    if not dec.is_finite():
        raise InvalidTimestampError(value)
    return dec


def parse_valid_until(valid_until: Timestamp) -> Decimal:
    return _to_decimal(valid_until)


def normalize_unix_timestamp(timestamp: Timestamp) -> str:
    dec = _to_decimal(timestamp)
    try:
        return format(dec.quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP), "f")
    except InvalidOperation:
        raise InvalidTimestampError(timestamp) from None


def format_valid_until(valid_until: Timestamp) -> str:
    if isinstance(valid_until, str):
        return valid_until
    return normalize_unix_timestamp(valid_until)


def make_valid_until(lifetime: int = SIGNATURE_LIFETIME, now: Optional[float] = None) -> str:
    if now is None:
        now = time.time()
    return normalize_unix_timestamp(_to_decimal(now) + lifetime)


def get_base(
    auth_user: str,
    valid_until: Timestamp,
    extra: Optional[Mapping[str, Any]] = None,
    value_dumper: Union[str, ValueDumper, None] = None,
) -> str:
    parts: List[str] = [format_valid_until(valid_until), auth_user]
    if extra:
        encoded_extra = sorted_urlencode(extra, quoted=True, value_dumper=value_dumper)
        if encoded_extra:
            parts.append(encoded_extra)
    return "_".join(parts)


def _key_bytes(secret_key: SecretKey) -> bytes:
    if isinstance(secret_key, (bytes, bytearray)):
        return bytes(secret_key)
    return secret_key.encode("utf-8")


def make_hash(
    auth_user: str,
    secret_key: SecretKey,
    valid_until: Timestamp,
    extra: Optional[Mapping[str, Any]] = None,
    value_dumper: Union[str, ValueDumper, None] = None,
) -> bytes:
    base = get_base(auth_user, valid_until, extra, value_dumper)
    logger.debug("signing base string for auth_user=%s: %s", auth_user, base)
    return hmac.new(_key_bytes(secret_key), base.encode("utf-8"), hashlib.sha1).digest()


@dataclass(frozen=True)
class Signature:
    signature: str
    auth_user: str
    valid_until: str
    extra: Dict[str, Any] = field(default_factory=dict)

    def is_expired(self, now: Optional[float] = None) -> bool:
        try:
            valid_until = parse_valid_until(self.valid_until)
        except InvalidTimestampError:
            return True
        if now is None:
            now = time.time()
        return not valid_until > _to_decimal(now)


def generate_signature(
    auth_user: str,
    secret_key: SecretKey,
    valid_until: Optional[Timestamp] = None,
    lifetime: int = SIGNATURE_LIFETIME,
    extra: Optional[Mapping[str, Any]] = None,
    value_dumper: Union[str, ValueDumper, None] = None,
    now: Optional[float] = None,
) -> Optional[Signature]:
    # Deep copy with string keys; nothing is shared with the caller's payload.
    extra = dict_to_ordered_dict(dict(extra or {}))
    if valid_until is None:
        valid_until = make_valid_until(lifetime, now=now)
    else:
        try:
            parse_valid_until(valid_until)
        except InvalidTimestampError:
            logger.debug("refusing to sign: unparsable valid_until %r", valid_until)
            return None
    valid_until = format_valid_until(valid_until)

    digest = make_hash(auth_user, secret_key, valid_until, extra, value_dumper)
    signature = base64.b64encode(digest).decode("ascii")
    return Signature(signature=signature, auth_user=auth_user, valid_until=valid_until, extra=extra)


class ErrorCode:
    INVALID_SIGNATURE = "INVALID_SIGNATURE"
    EXPIRED = "EXPIRED"
    INVALID_TIMESTAMP = "INVALID_TIMESTAMP"


@dataclass(frozen=True)
class SignatureValidationResult:
    ok: bool
    errors: Tuple[str, ...] = ()

    def __bool__(self) -> bool:
        return self.ok

    @property
    def reason(self) -> str:
        return ", ".join(self.errors)


def _as_bytes(value: Any) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    return str(value if value is not None else "").encode("utf-8")


def validate_signature(
    signature: str,
    auth_user: str,
    secret_key: SecretKey,
    valid_until: Timestamp,
    extra: Optional[Mapping[str, Any]] = None,
    return_object: bool = False,
    value_dumper: Union[str, ValueDumper, None] = None,
    now: Optional[float] = None,
) -> Union[bool, SignatureValidationResult]:
    expected: Optional[Signature] = None
    if valid_until is not None:
        expected = generate_signature(
            auth_user,
            secret_key,
            valid_until,
            SIGNATURE_LIFETIME,
            extra,
            value_dumper,
        )

    errors: List[str] = []
    if expected is None:
        errors.append(ErrorCode.INVALID_TIMESTAMP)
    else:
        if not hmac.compare_digest(_as_bytes(expected.signature), _as_bytes(signature)):
            errors.append(ErrorCode.INVALID_SIGNATURE)
        if expected.is_expired(now):
            errors.append(ErrorCode.EXPIRED)

    if errors:
        logger.debug("signature rejected for auth_user=%s: %s", auth_user, ", ".join(errors))

    result = SignatureValidationResult(ok=not errors, errors=tuple(errors))
    if return_object:
        return result
    return result.ok
