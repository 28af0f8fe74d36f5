import asyncio
import logging
from typing import Dict, Optional, Protocol, Set

from ..models.entry import PageId
from ..models.events import (
    NAV_LOADING,
    HeadersReceived,
    NavigationStateChanged,
    PageActivated,
    PageClosed,
    PageEvent,
)
from ..models.icon import IconDescriptor
from ..models.settings import MonitorConfig
from ..models.trust import TrustLevel
from .assets import GlyphAssetSource
from .providers import HandshakeDataProvider
from .renderer import IconStateRenderer
from .store import SecurityRecordStore

logger = logging.getLogger(__name__)


class BadgeSurface(Protocol):
    def draw(self, page_id: PageId, descriptor: IconDescriptor) -> None: ...


class SecurityEventDispatcher:
    """
    Routes platform page events to the record store and keeps badges current.

    Handshake data is acquired in background tasks; ``dispatch`` returns as
    soon as the event has been routed and never raises.
    """

    def __init__(
        self,
        store: SecurityRecordStore,
        provider: HandshakeDataProvider,
        renderer: IconStateRenderer,
        surface: Optional[BadgeSurface] = None,
        config: Optional[MonitorConfig] = None,
    ):
        self.store = store
        self.provider = provider
        self.renderer = renderer
        self.surface = surface
        self.config = config or MonitorConfig()
        self.active_page: Optional[PageId] = None
        self._page_urls: Dict[PageId, str] = {}
        self._loading: Set[PageId] = set()
        self._badges: Dict[PageId, IconDescriptor] = {}
        self._tasks: Set[asyncio.Task] = set()
        self.stats = {
            "events": 0,
            "ignored_subresources": 0,
            "captures": 0,
            "failures": 0,
            "discarded": 0,
        }
        if isinstance(renderer.assets, GlyphAssetSource):
            renderer.assets.add_listener(self.on_glyph_loaded)

    async def dispatch(self, event: PageEvent) -> None:
        self.stats["events"] += 1
        try:
            if isinstance(event, HeadersReceived):
                self._on_headers_received(event)
            elif isinstance(event, NavigationStateChanged):
                self._on_navigation(event)
            elif isinstance(event, PageActivated):
                self._on_activated(event)
            elif isinstance(event, PageClosed):
                self._on_closed(event)
            else:
                logger.warning(f"Ignoring unknown event type: {type(event).__name__}")
        except Exception as e:
            logger.error(f"Failed to handle {type(event).__name__}: {e}")
            logger.debug("Event handling error", exc_info=True)

    def _on_headers_received(self, event: HeadersReceived) -> None:
        if not event.main_frame:
            self.stats["ignored_subresources"] += 1
            return

        self.store.begin_capture(event.page_id, event.request_id)
        self._page_urls[event.page_id] = event.url
        task = asyncio.ensure_future(self._acquire(event))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _acquire(self, event: HeadersReceived) -> None:
        try:
            record = await self.provider.get_security_info(event.request_id)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Error fetching security info for page {event.page_id}: {e}")
            self.stats["failures"] += 1
            self.store.capture_failed(event.page_id, request_id=event.request_id)
        else:
            applied = self.store.capture(
                event.page_id,
                record,
                event.status_line,
                event.url,
                request_id=event.request_id,
            )
            self.stats["captures" if applied else "discarded"] += 1

        if self.store.is_tracked(event.page_id):
            self._refresh(event.page_id)

    def _on_navigation(self, event: NavigationStateChanged) -> None:
        if event.url:
            self._page_urls[event.page_id] = event.url
        if event.status == NAV_LOADING:
            self._loading.add(event.page_id)
        else:
            self._loading.discard(event.page_id)
        self._refresh(event.page_id)

    def _on_activated(self, event: PageActivated) -> None:
        self.active_page = event.page_id
        if event.url:
            self._page_urls[event.page_id] = event.url
        self._refresh(event.page_id)

    def _on_closed(self, event: PageClosed) -> None:
        self.store.evict(event.page_id)
        self._page_urls.pop(event.page_id, None)
        self._loading.discard(event.page_id)
        self._badges.pop(event.page_id, None)
        if self.active_page == event.page_id:
            self.active_page = None

    def current_level(self, page_id: PageId) -> Optional[TrustLevel]:
        if page_id in self._loading:
            return None
        level = self.store.level(page_id)
        if level is None:
            return None
        # Client-side navigation to another origin leaves the captured record behind.
        url = self._page_urls.get(page_id)
        if self.config.invalidate_stale_badge and url and not self.store.is_fresh(page_id, url):
            return None
        return level

    def _refresh(self, page_id: PageId) -> None:
        descriptor = self.renderer.render(self.current_level(page_id))
        self._badges[page_id] = descriptor
        if self.surface is None:
            return
        try:
            self.surface.draw(page_id, descriptor)
        except Exception as e:
            logger.error(f"Badge surface failed for page {page_id}: {e}")

    def refresh_all(self) -> None:
        for page_id in list(self._badges):
            self._refresh(page_id)

    def on_glyph_loaded(self, variant: str) -> None:
        logger.debug(f"{variant} glyph loaded, redrawing {len(self._badges)} badges")
        self.refresh_all()

    def badge(self, page_id: PageId) -> Optional[IconDescriptor]:
        return self._badges.get(page_id)

    def page_url(self, page_id: PageId) -> Optional[str]:
        return self._page_urls.get(page_id)

    def known_pages(self):
        return list(self._badges)

    async def drain(self) -> None:
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
