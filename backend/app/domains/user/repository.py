import uuid
from typing import Optional, cast

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.domains.user.models import User


class UserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        stmt = select(User).where(User.id == user_id)
        result = await self.session.execute(stmt)
        return cast(Optional[User], result.scalar_one_or_none())

    async def exists(self, user_id: uuid.UUID) -> bool:
        return await self.get_by_id(user_id) is not None
