from __future__ import annotations

import json
from pathlib import Path

from signkey import signature_to_dict, sorted_urlencode, validate_signed_request_data

SECRET_KEY = "UxuhnPaO4vKA"
AUTH_USER = "me@example.com"


def main() -> None:
    root = Path(__file__).resolve().parents[2]
    payload = json.loads((root / "tests" / "fixtures" / "order_payload.json").read_text())
    print(sorted_urlencode(payload, quoted=False))
    signed = signature_to_dict(AUTH_USER, SECRET_KEY, extra=payload)
    result = validate_signed_request_data(signed, SECRET_KEY)
    print(json.dumps({"signed": signed, "ok": result.ok, "errors": list(result.errors)}, indent=2, sort_keys=True))


if __name__ == "__main__":
    main()
