from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, Optional
import time

from .connection import ConnectionRecord

PageId = Hashable


@dataclass(frozen=True)
class PageSecurityEntry:
    page_id: PageId
    record: Optional[ConnectionRecord]
    origin_url: str
    http_status_line: Optional[str] = None
    captured_at: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "page_id": self.page_id,
            "record": self.record.to_dict() if self.record else None,
            "origin_url": self.origin_url,
            "http_status_line": self.http_status_line,
            "captured_at": self.captured_at,
        }
