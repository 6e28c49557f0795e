from __future__ import annotations

from typing import Any, Dict, Generator, Mapping, Optional, Union

import httpx

from .config import SignatureConfig
from .core import SecretKey, Timestamp, ValueDumper, generate_signature, get_value_dumper
from .exceptions import InvalidTimestampError
from .helpers import RequestHelper


def _query_safe(extra: Mapping[str, Any], dump: ValueDumper) -> Dict[str, str]:
    # Query values arrive as strings on the other side, so nested values are
    # sent in their dumped form; dumping a string is a no-op.
    return {str(k): dump(v) for k, v in extra.items()}


def sign_url(
    auth_user: str,
    secret_key: SecretKey,
    url: Union[str, httpx.URL],
    extra: Optional[Mapping[str, Any]] = None,
    valid_until: Optional[Timestamp] = None,
    config: Optional[SignatureConfig] = None,
    value_dumper: Union[str, ValueDumper, None] = None,
    now: Optional[float] = None,
) -> str:
    config = config or SignatureConfig()
    dump = get_value_dumper(value_dumper if value_dumper is not None else config.value_dumper)
    signature = generate_signature(
        auth_user,
        secret_key,
        valid_until=valid_until,
        lifetime=config.lifetime,
        extra=_query_safe(extra or {}, dump),
        value_dumper=dump,
        now=now,
    )
    if signature is None:
        raise InvalidTimestampError(valid_until)
    params = RequestHelper.from_config(config).signature_to_dict(signature)
    return str(httpx.URL(url).copy_merge_params(params))


class SignatureAuth(httpx.Auth):
    def __init__(
        self,
        auth_user: str,
        secret_key: SecretKey,
        config: Optional[SignatureConfig] = None,
        value_dumper: Union[str, ValueDumper, None] = None,
    ):
        if not auth_user:
            raise ValueError("auth_user is required for signature auth")
        if not secret_key:
            raise ValueError("secret_key is required for signature auth")
        self.auth_user = auth_user
        self.secret_key = secret_key
        self.config = config or SignatureConfig()
        self.helper = RequestHelper.from_config(self.config)
        self.value_dumper = get_value_dumper(value_dumper if value_dumper is not None else self.config.value_dumper)

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        reserved = set(self.helper.reserved_params)
        extra: Dict[str, str] = {}
        for k, v in request.url.params.multi_items():
            if k in reserved:
                continue
            if k in extra:
                raise ValueError(f"repeated query parameter {k!r} cannot be signed")
            extra[k] = v
        signature = generate_signature(
            self.auth_user,
            self.secret_key,
            lifetime=self.config.lifetime,
            extra=extra,
            value_dumper=self.value_dumper,
        )
        if signature is None:
            raise InvalidTimestampError(None)
        request.url = request.url.copy_with(params=self.helper.signature_to_dict(signature))
        yield request
