import logging
from typing import Dict, List, Optional

from ..models.connection import ConnectionRecord
from ..models.entry import PageId, PageSecurityEntry
from ..models.trust import TrustLevel
from ..utils.origin import same_origin
from .classifier import classify

logger = logging.getLogger(__name__)

_UNSET = object()


class SecurityRecordStore:
    """
    Per-page cache of captured connection records.

    Pages become tracked when a main-document acquisition begins (or on a
    direct capture) and stop being tracked when evicted. Asynchronous
    captures carry the request id they were started for and are applied only
    while that request is still the page's latest one.
    """

    def __init__(self):
        self._entries: Dict[PageId, PageSecurityEntry] = {}
        self._pending: Dict[PageId, object] = {}

    def begin_capture(self, page_id: PageId, request_id: str) -> None:
        self._pending[page_id] = request_id
        logger.debug(f"Acquisition {request_id} started for page {page_id}")

    def is_tracked(self, page_id: PageId) -> bool:
        return page_id in self._pending or page_id in self._entries

    def _is_current(self, page_id: PageId, request_id: Optional[str]) -> bool:
        if request_id is None:
            return True
        return self._pending.get(page_id, _UNSET) == request_id

    def capture(
        self,
        page_id: PageId,
        record: Optional[ConnectionRecord],
        http_status_line: Optional[str],
        origin_url: str,
        *,
        request_id: Optional[str] = None,
    ) -> bool:
        if not self._is_current(page_id, request_id):
            logger.debug(f"Discarding capture {request_id} for page {page_id}: page closed or request superseded")
            return False

        self._entries[page_id] = PageSecurityEntry(
            page_id=page_id,
            record=record,
            origin_url=origin_url,
            http_status_line=http_status_line,
        )
        if request_id is None:
            self._pending.setdefault(page_id, None)
        logger.debug(f"Captured security info for page {page_id} ({origin_url})")
        return True

    def capture_failed(self, page_id: PageId, *, request_id: Optional[str] = None) -> bool:
        if not self._is_current(page_id, request_id):
            return False
        removed = self._entries.pop(page_id, None) is not None
        if removed:
            logger.debug(f"Dropped security info for page {page_id} after failed capture")
        return removed

    def get(self, page_id: PageId) -> Optional[PageSecurityEntry]:
        return self._entries.get(page_id)

    def evict(self, page_id: PageId) -> None:
        self._entries.pop(page_id, None)
        self._pending.pop(page_id, None)

    def is_fresh(self, page_id: PageId, current_url: Optional[str]) -> bool:
        entry = self._entries.get(page_id)
        if entry is None or entry.record is None:
            return False
        return same_origin(entry.origin_url, current_url)

    def level(self, page_id: PageId) -> Optional[TrustLevel]:
        entry = self._entries.get(page_id)
        if entry is None or entry.record is None:
            return None
        return classify(entry.record)

    def page_ids(self) -> List[PageId]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, page_id: object) -> bool:
        return page_id in self._entries
