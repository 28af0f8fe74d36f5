from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from .entry import PageId
from .exceptions import RecordValidationException

NAV_LOADING = "loading"
NAV_COMPLETE = "complete"


@dataclass(frozen=True)
class HeadersReceived:
    request_id: str
    page_id: PageId
    url: str
    main_frame: bool = True
    status_line: Optional[str] = None


@dataclass(frozen=True)
class NavigationStateChanged:
    page_id: PageId
    status: str
    url: Optional[str] = None


@dataclass(frozen=True)
class PageActivated:
    page_id: PageId
    url: Optional[str] = None


@dataclass(frozen=True)
class PageClosed:
    page_id: PageId


PageEvent = Union[HeadersReceived, NavigationStateChanged, PageActivated, PageClosed]


def event_from_dict(data: Dict[str, Any]) -> PageEvent:
    """Decode one line of a recorded event log."""
    if not isinstance(data, dict):
        raise RecordValidationException("Event must be an object")
    kind = data.get("type")
    try:
        if kind == "headers_received":
            return HeadersReceived(
                request_id=str(data["request_id"]),
                page_id=data["page_id"],
                url=data["url"],
                main_frame=data.get("resource_type", "main_frame") == "main_frame",
                status_line=data.get("status_line"),
            )
        if kind == "navigation_state_changed":
            status = data["status"]
            if status not in (NAV_LOADING, NAV_COMPLETE):
                raise RecordValidationException("Unknown navigation status", field="status", value=status)
            return NavigationStateChanged(page_id=data["page_id"], status=status, url=data.get("url"))
        if kind == "page_activated":
            return PageActivated(page_id=data["page_id"], url=data.get("url"))
        if kind == "page_closed":
            return PageClosed(page_id=data["page_id"])
    except KeyError as e:
        raise RecordValidationException(f"Event is missing field {e}", field=str(e), context={"type": kind})
    raise RecordValidationException("Unknown event type", field="type", value=kind)
