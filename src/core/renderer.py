import logging
from typing import Optional, Protocol

from config.constants import BADGE_PALETTE, DEFAULT_ICON_PATHS
from ..models.icon import IconDescriptor
from ..models.trust import TrustLevel

logger = logging.getLogger(__name__)


class GlyphSource(Protocol):
    def is_available(self, variant: str) -> bool: ...

    def get(self, variant: str) -> Optional[bytes]: ...


class IconStateRenderer:
    def __init__(self, assets: Optional[GlyphSource] = None, theme: str = "light", size: int = 32):
        self.assets = assets
        self.theme = theme
        self.size = size

    def default_icon(self, level: Optional[TrustLevel] = None) -> IconDescriptor:
        path = DEFAULT_ICON_PATHS.get(self.theme, DEFAULT_ICON_PATHS["light"])
        return IconDescriptor(level=level, default_path=path, size=self.size)

    def render(self, level: Optional[TrustLevel]) -> IconDescriptor:
        if level is None:
            return self.default_icon()

        palette = BADGE_PALETTE[level.value]
        variant = palette["glyph"]
        if self.assets is None or not self.assets.is_available(variant):
            logger.debug(f"{variant} glyph not loaded yet, using default icon for {level.value}")
            return self.default_icon(level)

        return IconDescriptor(
            level=level,
            background=palette["background"],
            glyph_variant=variant,
            glyph=self.assets.get(variant),
            size=self.size,
        )
