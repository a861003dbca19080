"""Local draft cache that keeps the in-progress proposal across restarts.

The cache is a small JSON file of text values.  It is never the source of
truth: :func:`save_draft` and :func:`load_draft` swallow every cache failure so
that a broken or read-only file cannot interrupt editing.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Optional

from ..errors import LocalCacheUnavailable
from ..models.proposal_models import Proposal

__all__ = ["DRAFT_KEY", "DraftCache", "load_draft", "save_draft"]

logger = logging.getLogger(__name__)

DRAFT_KEY = "workshop_proposal_draft"


class DraftCache:
    """Key/value text store backed by a JSON file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def get(self, key: str) -> Optional[str]:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        try:
            entries = self._load()
        except LocalCacheUnavailable as exc:
            # an unreadable file is replaced by the next write
            logger.debug("Discarding draft cache contents: %s", exc)
            entries = {}
        entries[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(entries, f, ensure_ascii=False, indent=2)
        except OSError as exc:
            raise LocalCacheUnavailable(f"Cannot write {self.path}: {exc}") from exc

    def _load(self) -> Dict[str, object]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise LocalCacheUnavailable(f"Cannot read {self.path}: {exc}") from exc
        return data if isinstance(data, dict) else {}


def save_draft(cache: Optional[DraftCache], proposal: Proposal) -> bool:
    """Mirror ``proposal`` into ``cache``; return ``False`` if that failed."""

    if cache is None:
        return False
    try:
        cache.set(DRAFT_KEY, json.dumps(proposal.to_dict(), ensure_ascii=False))
    except LocalCacheUnavailable as exc:
        logger.debug("Draft not cached: %s", exc)
        return False
    return True


def load_draft(cache: Optional[DraftCache], *, year: str | None = None) -> Optional[Proposal]:
    """Return the cached draft merged over a blank proposal, if any."""

    if cache is None:
        return None
    try:
        raw = cache.get(DRAFT_KEY)
        if not raw:
            return None
        data = json.loads(raw)
        if not isinstance(data, dict):
            return None
        return Proposal.from_dict(data, year=year)
    except (LocalCacheUnavailable, ValueError) as exc:
        # ValueError covers JSONDecodeError and pydantic ValidationError
        logger.debug("Draft not restored: %s", exc)
        return None
