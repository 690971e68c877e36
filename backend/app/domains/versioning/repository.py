import uuid
from typing import Optional, Sequence, cast

from sqlalchemy import and_, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.domains.user.models import User
from backend.app.domains.versioning.errors import VersionConflictError
from backend.app.domains.versioning.models import DocumentVersion

# (version, author name, author email); author columns are None for unknown users
VersionWithAuthor = tuple[DocumentVersion, Optional[str], Optional[str]]


class VersionStore:
    """Append-only persistence of document versions keyed by (document_id, version_number)."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def append(self, version: DocumentVersion) -> DocumentVersion:
        if await self.exists(version.document_id, version.version_number):
            raise VersionConflictError(version.document_id, version.version_number)
        self.session.add(version)
        try:
            await self.session.flush()
        except IntegrityError as e:
            raise VersionConflictError(version.document_id, version.version_number) from e
        return version

    async def exists(self, document_id: uuid.UUID, version_number: int) -> bool:
        stmt = select(DocumentVersion.id).where(
            and_(
                DocumentVersion.document_id == document_id,
                DocumentVersion.version_number == version_number,
            )
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def get(self, document_id: uuid.UUID, version_number: int) -> Optional[DocumentVersion]:
        stmt = select(DocumentVersion).where(
            and_(
                DocumentVersion.document_id == document_id,
                DocumentVersion.version_number == version_number,
            )
        )
        result = await self.session.execute(stmt)
        return cast(Optional[DocumentVersion], result.scalar_one_or_none())

    async def list_versions(
        self, document_id: uuid.UUID, limit: int = 50, offset: int = 0
    ) -> Sequence[DocumentVersion]:
        stmt = (
            select(DocumentVersion)
            .where(DocumentVersion.document_id == document_id)
            .order_by(DocumentVersion.version_number.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return cast(Sequence[DocumentVersion], result.scalars().all())

    async def max_version(self, document_id: uuid.UUID) -> int:
        stmt = select(func.max(DocumentVersion.version_number)).where(
            DocumentVersion.document_id == document_id
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() or 0

    async def latest(self, document_id: uuid.UUID) -> Optional[DocumentVersion]:
        stmt = (
            select(DocumentVersion)
            .where(DocumentVersion.document_id == document_id)
            .order_by(DocumentVersion.version_number.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return cast(Optional[DocumentVersion], result.scalar_one_or_none())

    async def count(self, document_id: uuid.UUID) -> int:
        stmt = (
            select(func.count())
            .select_from(DocumentVersion)
            .where(DocumentVersion.document_id == document_id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one() or 0

    async def list_with_authors(
        self, document_id: uuid.UUID, limit: int = 50, offset: int = 0
    ) -> list[VersionWithAuthor]:
        stmt = (
            select(DocumentVersion, User.name, User.email)
            .outerjoin(User, User.id == DocumentVersion.changed_by)
            .where(DocumentVersion.document_id == document_id)
            .order_by(DocumentVersion.version_number.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return [(row[0], row[1], row[2]) for row in result.all()]

    async def get_with_author(
        self, document_id: uuid.UUID, version_number: int
    ) -> Optional[VersionWithAuthor]:
        stmt = (
            select(DocumentVersion, User.name, User.email)
            .outerjoin(User, User.id == DocumentVersion.changed_by)
            .where(
                and_(
                    DocumentVersion.document_id == document_id,
                    DocumentVersion.version_number == version_number,
                )
            )
        )
        result = await self.session.execute(stmt)
        row = result.one_or_none()
        if row is None:
            return None
        return (row[0], row[1], row[2])
