"""Configuration for linter settings. Immutable value object created by Infrastructure."""

import logging
from fnmatch import fnmatch
from pathlib import PurePath

logger = logging.getLogger(__name__)

_DEFAULTS: dict[str, object] = {
    "preserve_initializer": True,
    "backup": True,
    "exclude": [],
}


class ConfigurationLoader:
    """
    Immutable configuration for linter settings.

    Created by Infrastructure from the [tool.encapsulation-linter] table. Domain does
    not read the filesystem; Infrastructure calls ConfigFileLoader.load_config_from_fs()
    and constructs ConfigurationLoader(config_dict) at composition root.
    """

    def __init__(self, config_dict: dict[str, object]) -> None:
        self._config = self.validate_config(config_dict)

    def validate_config(self, config: dict[str, object]) -> dict[str, object]:
        """Return `config` with invalid values replaced by their defaults."""
        validated = dict(_DEFAULTS)
        for key, value in config.items():
            if key not in _DEFAULTS:
                logger.warning("Configuration Warning: unknown option '%s' ignored.", key)
                continue
            if key == "exclude":
                if not isinstance(value, list) or not all(isinstance(p, str) for p in value):
                    logger.warning("Configuration Warning: 'exclude' must be a list of glob strings.")
                    continue
            elif not isinstance(value, bool):
                logger.warning("Configuration Warning: '%s' must be a boolean.", key)
                continue
            validated[key] = value
        return validated

    @property
    def config(self) -> dict[str, object]:
        """Return the validated configuration."""
        return self._config

    @property
    def preserve_initializer(self) -> bool:
        return bool(self._config["preserve_initializer"])

    @property
    def backup(self) -> bool:
        return bool(self._config["backup"])

    @property
    def exclude(self) -> list[str]:
        return list(self._config["exclude"])  # type: ignore[call-overload]

    def is_excluded(self, path: str) -> bool:
        """True when `path` matches one of the configured exclude globs."""
        posix = PurePath(path).as_posix()
        return any(fnmatch(posix, pattern) or PurePath(posix).match(pattern) for pattern in self.exclude)
