from henwiki.core.exceptions import Unauthenticated
from henwiki.repositories import UserRepository
from henwiki.schemas.rbac import RoleRead
from henwiki.schemas.user import UserMe, UserRead
from henwiki.services.rbac import Identity, PermissionCatalog, RoleService, get_permission_flags


class UserProfileService:
    """当前用户资料：基本信息 + 角色 + 有效权限"""

    def __init__(self, users: UserRepository, roles: RoleService, catalog: PermissionCatalog):
        self.users = users
        self.roles = roles
        self.catalog = catalog

    async def get_profile(self, identity: Identity) -> UserMe:
        user = await self.users.get_by_id(identity.user_id)
        if user is None:
            # token 合法但用户已不存在，视为凭证失效
            raise Unauthenticated("User not found")

        roles = await self.roles.get_user_roles(user.id)
        highest = await self.roles.get_user_highest_role(user.id)
        codes = await self.catalog.get_user_permission_codes(user.id)

        return UserMe(
            **UserRead.model_validate(user).model_dump(),
            roles=[RoleRead.model_validate(r) for r in roles],
            highest_role=RoleRead.model_validate(highest) if highest else None,
            permissions=sorted(codes),
            permission_flags=get_permission_flags(codes),
        )
