from typing import Optional

from backend.app.domains.versioning.metrics import word_count
from backend.app.domains.versioning.models import ChangeType, DocumentVersion
from backend.app.domains.versioning.schemas import TRACKED_FIELDS, ChangeDecision, DocumentState

INITIAL_SUMMARY = "Document created"

_SINGLE_FIELD_TYPES = {
    "title": ChangeType.TITLE_CHANGED,
    "content": ChangeType.CONTENT_CHANGED,
    "visibility": ChangeType.VISIBILITY_CHANGED,
}


def _field_value(source: DocumentVersion | DocumentState, field: str) -> str:
    value = getattr(source, field)
    return getattr(value, "value", value)


def summarize_content_change(old_content: str, new_content: str) -> str:
    old_words = word_count(old_content)
    new_words = word_count(new_content)
    if new_words > old_words:
        return f"Added {new_words - old_words} words"
    if new_words < old_words:
        return f"Removed {old_words - new_words} words"
    return "Modified content"


class ChangeDetector:
    """Decides whether a proposed state warrants a new version and classifies the change."""

    def detect(
        self, latest: Optional[DocumentVersion], proposed: DocumentState
    ) -> ChangeDecision:
        if latest is None:
            return ChangeDecision(
                requires_version=True,
                change_type=ChangeType.CREATED,
                change_summary=INITIAL_SUMMARY,
                changed_fields=list(TRACKED_FIELDS),
            )

        changed = [
            field
            for field in TRACKED_FIELDS
            if _field_value(latest, field) != _field_value(proposed, field)
        ]
        if not changed:
            return ChangeDecision(requires_version=False)

        if len(changed) == 1:
            change_type = _SINGLE_FIELD_TYPES[changed[0]]
        else:
            change_type = ChangeType.UPDATED

        return ChangeDecision(
            requires_version=True,
            change_type=change_type,
            change_summary=self.summarize(latest, proposed, changed),
            changed_fields=changed,
        )

    def summarize(
        self, latest: DocumentVersion, proposed: DocumentState, changed: list[str]
    ) -> str:
        parts = []
        if "title" in changed:
            parts.append("Title changed")
        if "content" in changed:
            parts.append(summarize_content_change(latest.content, proposed.content))
        if "visibility" in changed:
            parts.append(f"Visibility changed to {_field_value(proposed, 'visibility')}")
        return ", ".join(parts)
