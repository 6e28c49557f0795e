from .auth import SignatureAuth, sign_url
from .config import (
    DEFAULT_AUTH_USER_PARAM,
    DEFAULT_EXTRA_PARAM,
    DEFAULT_SIGNATURE_PARAM,
    DEFAULT_VALID_UNTIL_PARAM,
    SIGNATURE_LIFETIME,
    SignatureConfig,
    get_config,
)
from .core import (
    ErrorCode,
    Signature,
    SignatureValidationResult,
    default_value_dumper,
    dict_to_ordered_dict,
    encode_uri_component,
    format_valid_until,
    generate_signature,
    get_base,
    get_value_dumper,
    javascript_value_dumper,
    make_hash,
    make_valid_until,
    normalize_unix_timestamp,
    parse_valid_until,
    sorted_urlencode,
    validate_signature,
)
from .exceptions import InvalidTimestampError, SignKeyError, ValidationFailed
from .helpers import (
    RequestHelper,
    dict_keys,
    extract_signed_data,
    signature_to_dict,
    validate_signed_request_data,
)

__all__ = [
    "SIGNATURE_LIFETIME",
    "DEFAULT_SIGNATURE_PARAM",
    "DEFAULT_AUTH_USER_PARAM",
    "DEFAULT_VALID_UNTIL_PARAM",
    "DEFAULT_EXTRA_PARAM",
    "SignatureConfig",
    "get_config",
    "ErrorCode",
    "Signature",
    "SignatureValidationResult",
    "default_value_dumper",
    "javascript_value_dumper",
    "get_value_dumper",
    "dict_to_ordered_dict",
    "encode_uri_component",
    "sorted_urlencode",
    "normalize_unix_timestamp",
    "format_valid_until",
    "parse_valid_until",
    "make_valid_until",
    "get_base",
    "make_hash",
    "generate_signature",
    "validate_signature",
    "RequestHelper",
    "dict_keys",
    "extract_signed_data",
    "signature_to_dict",
    "validate_signed_request_data",
    "sign_url",
    "SignatureAuth",
    "SignKeyError",
    "InvalidTimestampError",
    "ValidationFailed",
]
