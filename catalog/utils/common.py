# utils/common.py
import hashlib
from datetime import datetime, timezone
from typing import Mapping

from bson import ObjectId
from bson.errors import InvalidId

from catalog.utils.exceptions import MalformedIdentity


def utcnow() -> datetime:
    """Current UTC time truncated to the store's millisecond resolution."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def to_object_id(value: str, message: str) -> ObjectId:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError) as e:
        raise MalformedIdentity(message) from e


def sign_params(params: Mapping[str, object], api_secret: str) -> str:
    """SHA-1 signature of the sorted ``key=value`` pairs, as the media host expects."""
    to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params))
    return hashlib.sha1((to_sign + api_secret).encode()).hexdigest()
