import time
import hmac
import hashlib
import base64
import json
from typing import Any, Dict, Optional

ADMIN_ROLE = "admin"

# Signed payload, not a JWT: base64url(json) + "." + base64url(hmac-sha256)

def _b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")

def _b64url_decode(data: str) -> bytes:
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode((data + padding).encode("utf-8"))

def _digest(secret: str, msg: bytes) -> bytes:
    return hmac.new(secret.encode("utf-8"), msg, hashlib.sha256).digest()

def sign(payload: Dict[str, Any], secret: str, ttl_seconds: int) -> str:
    now = int(time.time())
    body = {**payload, "iat": now, "exp": now + int(ttl_seconds)}
    msg = json.dumps(body, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    return _b64url_encode(msg) + "." + _b64url_encode(_digest(secret, msg))

def verify(token: str, secret: str) -> Optional[Dict[str, Any]]:
    """Returns the payload of a valid, unexpired token, otherwise None."""
    try:
        msg_b64, sig_b64 = token.split(".", 1)
        msg = _b64url_decode(msg_b64)
        sig = _b64url_decode(sig_b64)
    except (ValueError, UnicodeEncodeError):
        return None

    if not hmac.compare_digest(sig, _digest(secret, msg)):
        return None

    try:
        payload = json.loads(msg.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        return None

    if not isinstance(payload, dict) or int(payload.get("exp", 0)) < int(time.time()):
        return None
    return payload

def is_admin(payload: Optional[Dict[str, Any]]) -> bool:
    return bool(payload) and payload.get("role") == ADMIN_ROLE
