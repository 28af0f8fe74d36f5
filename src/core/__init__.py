__version__ = "1.0.0"
__author__ = "certbadge"
__description__ = "TLS connection trust classification and page state cache"

from .weakness import detect_weakness
from .classifier import classify, describe
from .store import SecurityRecordStore
from .assets import GlyphAssetSource
from .renderer import IconStateRenderer
from .composer import DetailViewComposer, compose
from .presenter import DetailViewPresenter
from .providers import HandshakeDataProvider, RecordedHandshakeProvider
from .dispatcher import SecurityEventDispatcher, BadgeSurface

__all__ = [
    'detect_weakness',
    'classify',
    'describe',
    'SecurityRecordStore',
    'GlyphAssetSource',
    'IconStateRenderer',
    'DetailViewComposer',
    'compose',
    'DetailViewPresenter',
    'HandshakeDataProvider',
    'RecordedHandshakeProvider',
    'SecurityEventDispatcher',
    'BadgeSurface',
]
