from uuid import UUID

from backend.app.domains.versioning.history import HistoryReader
from backend.app.domains.versioning.schemas import (
    ContentDiff,
    FieldDiff,
    VersionDetail,
    VersionDiff,
    VersionRef,
)
from backend.app.logging_config import get_logger

logger = get_logger("app.domains.versioning.diff")


def _ref(version: VersionDetail) -> VersionRef:
    return VersionRef(
        version_number=version.version_number,
        change_type=version.change_type,
        change_summary=version.change_summary,
        changed_by=version.changed_by,
        created_at=version.created_at,
    )


def _field(old: str, new: str) -> FieldDiff:
    return FieldDiff(old=old, new=new, changed=old != new)


class DiffEngine:
    """
    Field-level comparison of two stored versions.

    The diff is directional: ``compare(a, b)`` reports ``a`` as old and ``b``
    as new, and count deltas are ``b - a``. Content is compared as a whole
    value only.
    """

    def __init__(self, history: HistoryReader):
        self.history = history

    async def compare(self, document_id: UUID, version_a: int, version_b: int) -> VersionDiff:
        a = await self.history.get_version(document_id, version_a)
        b = await self.history.get_version(document_id, version_b)

        diff = VersionDiff(
            document_id=document_id,
            from_version=_ref(a),
            to_version=_ref(b),
            title=_field(a.title, b.title),
            content=ContentDiff(
                old=a.content,
                new=b.content,
                changed=a.content != b.content,
                word_count_diff=b.word_count - a.word_count,
                character_count_diff=b.character_count - a.character_count,
            ),
            visibility=_field(a.visibility.value, b.visibility.value),
        )
        logger.debug(
            f"Compared versions {version_a} -> {version_b} of document {document_id}: "
            f"title={diff.title.changed} content={diff.content.changed} "
            f"visibility={diff.visibility.changed}"
        )
        return diff
