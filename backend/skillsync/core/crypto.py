import base64
import json
import time

from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

# ---------- BASE64URL ----------

def b64url_encode(data: bytes) -> str:
    """Unpadded base64url, as used in JWT segments."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def b64url_decode(segment: str) -> bytes:
    padding_len = -len(segment) % 4
    return base64.urlsafe_b64decode(segment + "=" * padding_len)


def _json_segment(obj: dict) -> str:
    return b64url_encode(json.dumps(obj, separators=(",", ":")).encode("utf-8"))


# ---------- RS256 (service account assertions) ----------

def load_private_key(private_key_pem: str) -> rsa.RSAPrivateKey:
    """
    Load a PKCS#8 PEM key. Service account JSON often carries literal
    "\\n" sequences instead of newlines.
    """
    pem = private_key_pem.replace("\\n", "\n").encode("utf-8")
    key = serialization.load_pem_private_key(pem, password=None)
    if not isinstance(key, rsa.RSAPrivateKey):
        raise ValueError("Service account key is not an RSA key")
    return key


def sign_rs256_jwt(claims: dict, private_key_pem: str) -> str:
    """
    Build header.payload.signature with RSASSA-PKCS1-v1_5 / SHA-256
    """
    header = {"alg": "RS256", "typ": "JWT"}
    signing_input = f"{_json_segment(header)}.{_json_segment(claims)}"

    key = load_private_key(private_key_pem)
    signature = key.sign(
        signing_input.encode("ascii"),
        padding.PKCS1v15(),
        hashes.SHA256(),
    )
    return f"{signing_input}.{b64url_encode(signature)}"


def build_service_account_assertion(
    client_email: str,
    private_key_pem: str,
    scope: str,
    audience: str,
    lifetime_seconds: int = 3600,
    now: int | None = None,
) -> str:
    issued_at = int(now if now is not None else time.time())
    claims = {
        "iss": client_email,
        "scope": scope,
        "aud": audience,
        "iat": issued_at,
        "exp": issued_at + lifetime_seconds,
    }
    return sign_rs256_jwt(claims, private_key_pem)

