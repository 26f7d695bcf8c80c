"""Runtime configuration model for fsdb.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import (
    DEFAULT_DATA_ROOT,
    DEFAULT_PRETTY_SETTINGS,
    DEFAULT_QUALIFIED_KEYWORDS,
    FALSE_ENV_VALUES,
    TRUE_ENV_VALUES,
)
from core.errors import FsdbConfigError


@dataclass(frozen=True)
class FsdbConfig:
    """Validated runtime configuration.

    Attributes:
        data_root: Root directory holding the settings file and table dirs.
        qualified_keywords: Seed value for the naming flag of new settings.
        pretty_settings: Whether the settings file is written in block style.
    """

    data_root: Path
    qualified_keywords: bool
    pretty_settings: bool

    @classmethod
    def from_env(cls) -> "FsdbConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            FsdbConfigError: If environment values are invalid.
        """
        data_root_value = os.getenv("FSDB_DATA_ROOT", str(DEFAULT_DATA_ROOT))
        qualified_keywords = _parse_bool(
            "FSDB_QUALIFIED_KEYWORDS",
            os.getenv("FSDB_QUALIFIED_KEYWORDS"),
            DEFAULT_QUALIFIED_KEYWORDS,
        )
        pretty_settings = _parse_bool(
            "FSDB_PRETTY_SETTINGS",
            os.getenv("FSDB_PRETTY_SETTINGS"),
            DEFAULT_PRETTY_SETTINGS,
        )
        return cls(
            data_root=Path(data_root_value).expanduser().resolve(),
            qualified_keywords=qualified_keywords,
            pretty_settings=pretty_settings,
        )


def _parse_bool(env_name: str, raw_value: str | None, default_value: bool) -> bool:
    """Parse a boolean environment value.

    Args:
        env_name: Variable name used in error messages.
        raw_value: Raw string from environment, or None when unset.
        default_value: Value used when the variable is unset or blank.

    Returns:
        Parsed boolean.

    Raises:
        FsdbConfigError: If value is not a recognized boolean literal.
    """
    if raw_value is None or not raw_value.strip():
        return default_value
    normalized = raw_value.strip().lower()
    if normalized in TRUE_ENV_VALUES:
        return True
    if normalized in FALSE_ENV_VALUES:
        return False
    raise FsdbConfigError(
        f"Invalid {env_name} value: expected a boolean, got '{raw_value}'. "
        f"Use one of {', '.join(TRUE_ENV_VALUES + FALSE_ENV_VALUES)}."
    )
