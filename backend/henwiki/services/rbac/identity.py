"""
身份校验：把 Bearer 凭证转换成稳定的数值用户 ID。

只解析 token，不访问任何角色/权限存储，认证失败时在权限查询之前直接抛出。
"""
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from henwiki.core.exceptions import Unauthenticated
from henwiki.core.logging import logger
from henwiki.utils.security import decode_token, extract_bearer_token


@dataclass(frozen=True)
class Identity:
    user_id: int
    claims: Mapping[str, Any] = field(default_factory=dict, compare=False)


class IdentityVerifier(Protocol):
    async def verify(self, authorization: str | None) -> Identity: ...


class JWTIdentityVerifier:
    """HS256 access token 校验器"""

    async def verify(self, authorization: str | None) -> Identity:
        token = extract_bearer_token(authorization)
        if token is None:
            raise Unauthenticated("Missing authentication credentials")

        try:
            payload = decode_token(token)
        except ValueError as e:
            logger.warning("authentication_failed", extra={"reason": "invalid_token", "error": str(e)})
            raise Unauthenticated("Invalid token") from e

        if payload.get("type") != "access":
            logger.warning("authentication_failed", extra={"reason": "invalid_token_type"})
            raise Unauthenticated("Invalid token type")

        try:
            user_id = int(payload.get("sub"))
        except (TypeError, ValueError) as e:
            logger.warning("authentication_failed", extra={"reason": "invalid_subject"})
            raise Unauthenticated("Invalid token payload") from e

        return Identity(user_id=user_id, claims=payload)
