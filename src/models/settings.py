from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from config.constants import DEFAULT_CONFIG, DEFAULT_ICON_PATHS, GLYPH_VARIANTS, get_env_overrides
from .exceptions import ConfigurationException


def _default_glyph_paths() -> Dict[str, str]:
    return dict(DEFAULT_CONFIG["glyph_paths"])


@dataclass
class MonitorConfig:
    theme: str = "light"
    badge_size: int = 32
    invalidate_stale_badge: bool = True
    asset_timeout: int = 10
    asset_retries: int = 2
    glyph_paths: Dict[str, str] = field(default_factory=_default_glyph_paths)
    log_level: str = "WARNING"
    log_file: Optional[str] = None

    def validate(self):
        errors = []

        if self.theme not in DEFAULT_ICON_PATHS:
            errors.append(f"Theme must be one of {sorted(DEFAULT_ICON_PATHS)}")

        if not (8 <= self.badge_size <= 256):
            errors.append("Badge size must be between 8 and 256 pixels")

        if not (1 <= self.asset_timeout <= 120):
            errors.append("Asset timeout must be between 1 and 120 seconds")

        if not (0 <= self.asset_retries <= 10):
            errors.append("Asset retries must be between 0 and 10")

        if not isinstance(self.invalidate_stale_badge, bool):
            errors.append("invalidate_stale_badge must be boolean")

        for variant in self.glyph_paths:
            if variant not in GLYPH_VARIANTS:
                errors.append(f"Unknown glyph variant: {variant}")

        if self.log_level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            errors.append(f"Invalid log level: {self.log_level}")

        if errors:
            raise ConfigurationException(
                "Configuration validation failed",
                context={"errors": errors, "config": self.to_dict()},
            )

    @classmethod
    def from_env(cls, **overrides: Any) -> "MonitorConfig":
        """Defaults, then CERTBADGE_* environment variables, then explicit overrides."""

        env = get_env_overrides()
        glyph_paths = dict(DEFAULT_CONFIG["glyph_paths"])
        if env.get("glyph_light"):
            glyph_paths["light"] = env["glyph_light"]
        if env.get("glyph_dark"):
            glyph_paths["dark"] = env["glyph_dark"]

        values: Dict[str, Any] = {
            "theme": env.get("theme", DEFAULT_CONFIG["theme"]),
            "badge_size": DEFAULT_CONFIG["badge_size"],
            "invalidate_stale_badge": DEFAULT_CONFIG["invalidate_stale_badge"],
            "asset_timeout": DEFAULT_CONFIG["asset_timeout"],
            "asset_retries": DEFAULT_CONFIG["asset_retries"],
            "glyph_paths": glyph_paths,
            "log_level": env.get("log_level", DEFAULT_CONFIG["log_level"]),
            "log_file": env.get("log_file"),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "theme": self.theme,
            "badge_size": self.badge_size,
            "invalidate_stale_badge": self.invalidate_stale_badge,
            "asset_timeout": self.asset_timeout,
            "asset_retries": self.asset_retries,
            "glyph_paths": self.glyph_paths.copy(),
            "log_level": self.log_level,
            "log_file": self.log_file,
        }
