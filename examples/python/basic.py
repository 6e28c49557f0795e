import os

import httpx

from signkey import SignatureAuth, get_config, sign_url

config = get_config()
auth_user = os.getenv("SIGNKEY_AUTH_USER", "me@example.com")
secret_key = os.getenv("SIGNKEY_SECRET_KEY", "")

print("signed url:", sign_url(auth_user, secret_key, "http://localhost:8000/pay", extra={"order_id": "o-1"}, config=config))

base_url = os.getenv("SIGNKEY_BASE_URL")
if base_url:
    with httpx.Client(auth=SignatureAuth(auth_user, secret_key, config=config)) as client:
        resp = client.get(base_url, params={"order_id": "o-1"})
        print("status:", resp.status_code)
