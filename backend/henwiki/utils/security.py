"""
安全工具模块：JWT access token 编解码、Bearer 头解析
"""
from datetime import timedelta
from typing import Any

from jose import JWTError, jwt

from henwiki.core.config import settings
from henwiki.utils.time_utils import Datetime


def create_access_token(user_id: int, expires_minutes: int | None = None) -> str:
    """创建 access token（sub 携带数值用户 ID）"""
    now = Datetime.now()
    expire = now + timedelta(minutes=expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {
        "sub": str(user_id),
        "type": "access",
        "exp": expire,
        "iat": now,
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict[str, Any]:
    """解码并验证 JWT token，返回 payload"""
    try:
        return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        raise ValueError(f"Invalid token: {e}") from e


def extract_bearer_token(authorization: str | None) -> str | None:
    """从 Authorization 头中取出 Bearer token，格式不符返回 None"""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()
