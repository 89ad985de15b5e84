from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from henwiki.models import User


class UserRepository:
    """
    用户仓库：RBAC 只需要确认用户存在及按邮箱查找。
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: int) -> User | None:
        return await self.session.get(User, user_id)

    async def get_by_email(self, email: str) -> User | None:
        stmt = select(User).where(User.email == email)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create_user(self, email: str, name: str | None = None, is_active: bool = True) -> User:
        user = User(email=email, name=name, is_active=is_active)
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user
