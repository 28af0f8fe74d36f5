import asyncio
import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from config.constants import GLYPH_VARIANTS
from ..models.exceptions import AssetException

logger = logging.getLogger(__name__)


class GlyphAssetSource:
    """
    Loads the light and dark badge glyphs in the background.

    Rendering only ever asks ``is_available``/``get``; it never waits on a load.
    Locations may be local paths or http(s) URLs.
    """

    def __init__(
        self,
        locations: Dict[str, str],
        timeout: int = 10,
        max_retries: int = 2,
        session: Optional[requests.Session] = None,
    ):
        unknown = set(locations) - set(GLYPH_VARIANTS)
        if unknown:
            raise AssetException(f"Unknown glyph variants: {sorted(unknown)}")
        self.locations = dict(locations)
        self.timeout = timeout
        self.max_retries = max_retries
        self._session = session
        self._glyphs: Dict[str, bytes] = {}
        self._tasks: Dict[str, asyncio.Task] = {}
        self._listeners: List[Callable[[str], None]] = []

    def _create_session(self) -> requests.Session:
        session = requests.Session()
        retry = Retry(
            total=self.max_retries + 1,
            connect=self.max_retries + 1,
            read=self.max_retries + 1,
            backoff_factor=0.5,
            status_forcelist=(408, 429, 500, 502, 503, 504),
            allowed_methods=frozenset(["GET"]),
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        return session

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            self._session = self._create_session()
        return self._session

    def add_listener(self, callback: Callable[[str], None]) -> None:
        """Call ``callback(variant)`` whenever a glyph becomes available."""
        self._listeners.append(callback)

    def _notify(self, variant: str) -> None:
        for callback in list(self._listeners):
            try:
                callback(variant)
            except Exception as e:
                logger.error(f"Glyph listener failed for {variant}: {e}")

    def is_available(self, variant: str) -> bool:
        return variant in self._glyphs

    def get(self, variant: str) -> Optional[bytes]:
        return self._glyphs.get(variant)

    def provide(self, variant: str, data: bytes) -> None:
        if variant not in GLYPH_VARIANTS:
            raise AssetException("Unknown glyph variant", variant=variant)
        self._glyphs[variant] = data
        self._notify(variant)

    def _read(self, variant: str, location: str) -> bytes:
        if location.startswith(("http://", "https://")):
            try:
                resp = self.session.get(location, timeout=self.timeout)
            except requests.RequestException as e:
                raise AssetException(f"Glyph download failed: {e}", variant=variant, location=location)
            if resp.status_code != 200:
                raise AssetException(
                    f"Glyph download returned HTTP {resp.status_code}", variant=variant, location=location
                )
            return resp.content
        try:
            return Path(location).read_bytes()
        except OSError as e:
            raise AssetException(f"Glyph file unreadable: {e}", variant=variant, location=location)

    async def load(self, variant: str) -> bool:
        location = self.locations.get(variant)
        if not location:
            logger.warning(f"No location configured for {variant} glyph")
            return False
        try:
            data = await asyncio.to_thread(self._read, variant, location)
        except AssetException as e:
            logger.warning(f"Glyph {variant} unavailable, default icon will be used: {e}")
            return False
        if not data:
            logger.warning(f"Glyph {variant} at {location} is empty")
            return False
        self._glyphs[variant] = data
        logger.debug(f"Loaded {variant} glyph ({len(data)} bytes)")
        self._notify(variant)
        return True

    def start(self) -> None:
        """Schedule loading of every configured variant on the running loop."""
        for variant in self.locations:
            if variant not in self._tasks and not self.is_available(variant):
                self._tasks[variant] = asyncio.ensure_future(self.load(variant))

    async def wait(self) -> Dict[str, bool]:
        self.start()
        results = await asyncio.gather(*self._tasks.values())
        return dict(zip(self._tasks.keys(), results))

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None
