"""Configuration loader for linter settings. Immutable value object created by Infrastructure."""

from __future__ import annotations

import logging

from checked_exceptions_linter.domain.constants import NOISE_FAMILIES, SHORT_COMMENT_FLAGS
from checked_exceptions_linter.domain.entities import Visibility


class ConfigurationLoader:
    """
    Immutable configuration for linter settings.

    Created by Infrastructure from the [tool.checked-exceptions] table. Domain does not
    read the filesystem; Infrastructure calls ConfigFileLoader.load_config_from_fs()
    and constructs ConfigurationLoader(config_dict) at composition root.
    Every rule receives the same instance, so a pass sees one snapshot.
    """

    BOOLEAN_KEYS: frozenset[str] = frozenset(NOISE_FAMILIES) | frozenset(SHORT_COMMENT_FLAGS)
    KNOWN_KEYS: frozenset[str] = BOOLEAN_KEYS | frozenset({"exclude_paths"})

    def __init__(self, config_dict: dict[str, object]) -> None:
        """Set config once at construction. No mutable class or instance state after init."""
        self._config = dict(config_dict)
        if config_dict:
            self.validate_config(config_dict)

    def validate_config(self, config: dict[str, object]) -> None:
        """Warn about unknown keys and non-boolean flags. Never raises."""
        for key, value in config.items():
            if key not in self.KNOWN_KEYS:
                logging.warning(
                    "Configuration Warning: unknown [tool.checked-exceptions] key '%s' ignored.", key)
            elif key in self.BOOLEAN_KEYS and not isinstance(value, bool):
                logging.warning(
                    "Configuration Warning: '%s' should be true or false, got %r.", key, value)

    @property
    def config(self) -> dict[str, object]:
        """Return the loaded configuration."""
        return self._config

    def _flag(self, key: str) -> bool:
        return self._config.get(key, False) is True

    @property
    def flag_argument_exceptions(self) -> bool:
        """Report TypeError/ValueError and subclasses."""
        return self._flag("flag_argument_exceptions")

    @property
    def flag_format_exceptions(self) -> bool:
        return self._flag("flag_format_exceptions")

    @property
    def flag_overflow_exceptions(self) -> bool:
        return self._flag("flag_overflow_exceptions")

    @property
    def flag_assertion_exceptions(self) -> bool:
        return self._flag("flag_assertion_exceptions")

    @property
    def flag_not_supported_exceptions(self) -> bool:
        return self._flag("flag_not_supported_exceptions")

    @property
    def flag_not_implemented_exceptions(self) -> bool:
        return self._flag("flag_not_implemented_exceptions")

    def is_family_flagged(self, flag: str) -> bool:
        """True if the noise family behind ``flag`` should be reported."""
        return self._flag(flag)

    def short_comment_for(self, visibility: Visibility) -> bool:
        """Whether fixes for members of this visibility emit exception entries only."""
        return self._flag(f"short_comment_for_{visibility.value}")

    @property
    def exclude_paths(self) -> list[str]:
        """
        Path fragments the CLI skips entirely.

        Intended for generated sources and deliberate-violation fixtures.
        """
        raw = self._config.get("exclude_paths", [])
        if isinstance(raw, list):
            return [str(x) for x in raw if isinstance(x, str)]
        return []
