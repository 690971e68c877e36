import uuid
from typing import Optional, Sequence, cast

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.domains.document.models import Document, Visibility


class DocumentRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_all(self) -> Sequence[Document]:
        """List all documents ordered by creation date descending."""
        stmt = select(Document).order_by(Document.created_at.desc())
        result = await self.session.execute(stmt)
        return cast(Sequence[Document], result.scalars().all())

    async def search(
        self, query: str, viewer_id: uuid.UUID, limit: int = 50
    ) -> Sequence[Document]:
        """Case-insensitive substring match on title or content, newest first.

        Only public documents and documents authored by `viewer_id` are returned.
        """
        stmt = (
            select(Document)
            .where(
                or_(
                    Document.title.icontains(query, autoescape=True),
                    Document.content.icontains(query, autoescape=True),
                )
            )
            .where(or_(Document.visibility == Visibility.PUBLIC, Document.author_id == viewer_id))
            .order_by(Document.created_at.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return cast(Sequence[Document], result.scalars().all())

    async def create(self, document: Document) -> Document:
        self.session.add(document)
        await self.session.flush()
        return document

    async def get_by_id(self, document_id: uuid.UUID) -> Optional[Document]:
        stmt = select(Document).where(Document.id == document_id)
        result = await self.session.execute(stmt)
        return cast(Optional[Document], result.scalar_one_or_none())

    async def get_for_update(self, document_id: uuid.UUID) -> Optional[Document]:
        """Load the document row locked until the surrounding transaction ends."""
        stmt = select(Document).where(Document.id == document_id).with_for_update()
        result = await self.session.execute(stmt)
        return cast(Optional[Document], result.scalar_one_or_none())

    async def save(self, document: Document) -> Document:
        await self.session.flush()
        return document
