import hashlib
import uuid

API_KEY_PREFIX = "cms_"


def hash_token(s: str) -> str:
    return hashlib.sha256(s.encode()).hexdigest()


def generate_api_key() -> str:
    return API_KEY_PREFIX + uuid.uuid4().hex
