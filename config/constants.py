import os
from typing import Dict, Any, List

ICON_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'icons')

__version__ = "1.0.0"

DEFAULT_CONFIG = {
    'theme': 'light',
    'badge_size': 32,
    'invalidate_stale_badge': True,
    'asset_timeout': 10,
    'asset_retries': 2,
    'log_level': 'WARNING',
    'glyph_paths': {
        'light': os.path.join(ICON_DIR, 'glyph-light.svg'),
        'dark': os.path.join(ICON_DIR, 'glyph-dark.svg'),
    },
}

# Fixed palette; values are relied upon by badge surfaces.
BADGE_PALETTE = {
    'secure': {'background': '#30d158', 'glyph': 'dark'},
    'weak': {'background': '#ffcc00', 'glyph': 'dark'},
    'broken': {'background': '#ff453a', 'glyph': 'light'},
    'insecure': {'background': '#ff453a', 'glyph': 'light'},
}

DEFAULT_ICON_PATHS = {
    'light': 'icons/lock-outline-light.svg',
    'dark': 'icons/lock-outline-dark.svg',
}

GLYPH_VARIANTS = ('light', 'dark')

CIPHER_SUITE_PREFIX = 'TLS_'

CIPHER_WEAKNESS_RULES: List[Dict[str, str]] = [
    {'marker': 'TLS_RSA_', 'match': 'prefix', 'reason': 'lacks forward secrecy'},
    {'marker': '_CBC_', 'match': 'contains', 'reason': 'uses outdated CBC mode'},
    {'marker': '_RC4_', 'match': 'contains', 'reason': 'uses insecure RC4 cipher'},
    {'marker': '_3DES_', 'match': 'contains', 'reason': 'uses outdated 3DES cipher'},
]

TRUST_REASONS = {
    'insecure': 'connection is not encrypted',
    'broken': 'certificate has an issue (expired, self-signed, hostname mismatch, etc.)',
    'weak': 'connection uses a weak protocol',
}

DETAIL_MESSAGES = {
    'no_page': 'No active tab found.',
    'not_https': 'This page is not secure (HTTP). No certificate to show.',
    'not_captured': 'No certificate information captured yet. Please reload the page and try again.',
    'retrieval_failed': 'Could not retrieve certificate information.',
}

CERTIFICATE_FALLBACK_LABEL = 'Details'

EXIT_CODES = {
    'SUCCESS': 0,
    'USAGE_ERROR': 1,
    'INPUT_ERROR': 2,
    'CONFIG_ERROR': 3,
    'UNKNOWN_ERROR': 255
}

ENV_VARS = {
    'CERTBADGE_THEME': 'theme',
    'CERTBADGE_LOG_LEVEL': 'log_level',
    'CERTBADGE_LOG_FILE': 'log_file',
    'CERTBADGE_GLYPH_LIGHT': 'glyph_light',
    'CERTBADGE_GLYPH_DARK': 'glyph_dark',
}

def get_version() -> str:
    return __version__

def get_env_overrides() -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for env_name, key in ENV_VARS.items():
        value = os.environ.get(env_name)
        if value:
            out[key] = value
    return out
