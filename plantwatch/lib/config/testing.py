"""Settings overrides for tests. Not for use in application code."""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import plantwatch.lib.config.settings as _settings_module
from plantwatch.lib.config.settings import Settings, _load_settings


def set_settings(settings: Settings | None) -> None:
    """Make get_settings() return ``settings``, or reload from env with None."""
    _settings_module._settings_override = settings
    _load_settings.cache_clear()


@contextmanager
def override_settings(**fields: Any) -> Iterator[Settings]:
    """Temporarily replace the settings with the given field values.

    The .env file is ignored so only defaults and ``fields`` apply.
    """
    previous = _settings_module._settings_override
    settings = Settings(_env_file=None, **fields)
    set_settings(settings)
    try:
        yield settings
    finally:
        set_settings(previous)
