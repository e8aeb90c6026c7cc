"""Topic history stores: remember used titles so the generator never repeats one"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from sqlmodel import Session, col, func, select

from postpub.core.utils.text import fingerprint, normalize_ws
from postpub.crud.models import TopicRecord


logger = logging.getLogger(__name__)

DEFAULT_MAX_HISTORY = 200


class TopicHistoryStore(ABC):
    """Titles are compared by fingerprint, so case and spacing differences still match."""

    max_history: int = DEFAULT_MAX_HISTORY

    @abstractmethod
    def is_used(self, title: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def record(self, title: str, keyword: str, persona: Optional[str] = None) -> TopicRecord:
        """Store title (idempotent per fingerprint), evicting the oldest beyond max_history."""
        raise NotImplementedError

    @abstractmethod
    def recent(self, limit: Optional[int] = None) -> list[TopicRecord]:
        """Newest first."""
        raise NotImplementedError

    def pick_available(self, candidates: list[str], persona: Optional[str] = None) -> Optional[str]:
        """Return the first unused candidate, or None when every one is taken."""
        for title in candidates:
            if not self.is_used(title):
                return title
        logger.warning("All %d candidate titles already used%s", len(candidates), f" for {persona}" if persona else "")
        return None


class MemoryTopicHistory(TopicHistoryStore):
    def __init__(self, max_history: int = DEFAULT_MAX_HISTORY):
        self.max_history = max_history
        self._records: dict[str, TopicRecord] = {}
        self._next_id = 1

    def is_used(self, title: str) -> bool:
        return fingerprint(title) in self._records

    def record(self, title: str, keyword: str, persona: Optional[str] = None) -> TopicRecord:
        fp = fingerprint(title)
        if fp in self._records:
            return self._records[fp]
        rec = TopicRecord(
            id=self._next_id, fingerprint=fp, title=normalize_ws(title),
            keyword=keyword, persona=persona, created_at=datetime.now(),
        )
        self._records[fp] = rec
        self._next_id += 1
        while len(self._records) > self.max_history:
            # dicts keep insertion order, so the first key is the oldest
            self._records.pop(next(iter(self._records)))
        return rec

    def recent(self, limit: Optional[int] = None) -> list[TopicRecord]:
        return list(reversed(self._records.values()))[:limit]


class SQLTopicHistory(TopicHistoryStore):
    def __init__(self, session: Session, max_history: int = DEFAULT_MAX_HISTORY):
        self.session = session
        self.max_history = max_history

    def _get(self, fp: str) -> Optional[TopicRecord]:
        return self.session.exec(select(TopicRecord).where(TopicRecord.fingerprint == fp)).first()

    def is_used(self, title: str) -> bool:
        return self._get(fingerprint(title)) is not None

    def record(self, title: str, keyword: str, persona: Optional[str] = None) -> TopicRecord:
        fp = fingerprint(title)
        if (existing := self._get(fp)) is not None:
            return existing
        rec = TopicRecord(fingerprint=fp, title=normalize_ws(title), keyword=keyword, persona=persona)
        self.session.add(rec)
        self.session.flush()
        self._evict()
        self.session.commit()
        self.session.refresh(rec)
        logger.debug("Recorded topic %r", rec.title)
        return rec

    def _evict(self) -> None:
        total = self.session.exec(select(func.count()).select_from(TopicRecord)).one()
        excess = total - self.max_history
        if excess <= 0:
            return
        oldest = self.session.exec(
            select(TopicRecord).order_by(col(TopicRecord.created_at), col(TopicRecord.id)).limit(excess)
        ).all()
        for rec in oldest:
            self.session.delete(rec)
        logger.debug("Evicted %d topic(s) beyond max_history=%d", len(oldest), self.max_history)

    def recent(self, limit: Optional[int] = None) -> list[TopicRecord]:
        stmt = select(TopicRecord).order_by(col(TopicRecord.created_at).desc(), col(TopicRecord.id).desc())
        if limit:
            stmt = stmt.limit(limit)
        return list(self.session.exec(stmt).all())
