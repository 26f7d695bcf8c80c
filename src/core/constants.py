"""Core constants used across fsdb modules.

This module centralizes storage layout names and defaults.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_DATA_ROOT = Path("resources") / "db"
SETTINGS_FILE_NAME = "settings.yaml"
SETTINGS_TEMP_PREFIX = ".settings-"
TABLES_KEY = "tables"
QUALIFIED_KEYWORDS_KEY = "useQualifiedKeywords"
TABLE_PATH_KEY = "path"
TABLE_COUNTER_KEY = "counter"
ID_FIELD_NAME = "id"
QUALIFIED_KEY_SEPARATOR = "/"
ORDER_DESC_TOKEN = "desc"
DEFAULT_QUALIFIED_KEYWORDS = False
DEFAULT_PRETTY_SETTINGS = True
TRUE_ENV_VALUES = ("1", "true", "yes", "on")
FALSE_ENV_VALUES = ("0", "false", "no", "off")
