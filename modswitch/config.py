"""Settings read from the environment."""

import os
from dataclasses import dataclass

TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in TRUTHY


@dataclass
class Settings:
    api_key: str | None = None
    api_url: str | None = None
    # Offer files regardless of the instance's game version
    disable_add_mod_restrictions: bool = False
    analytics_url: str | None = None
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, **overrides) -> "Settings":
        """Build settings from MODSWITCH_* / CURSEFORGE_API_KEY variables."""
        settings = cls(
            api_key=os.environ.get("CURSEFORGE_API_KEY"),
            api_url=os.environ.get("MODSWITCH_API_URL"),
            disable_add_mod_restrictions=_env_flag("MODSWITCH_DISABLE_ADD_MOD_RESTRICTIONS"),
            analytics_url=os.environ.get("MODSWITCH_ANALYTICS_URL"),
            log_level=os.environ.get("MODSWITCH_LOG_LEVEL", "WARNING"),
        )
        for key, value in overrides.items():
            if value is not None:
                setattr(settings, key, value)
        return settings
