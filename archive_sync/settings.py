"""
Initializes the Dynaconf settings object for the archive_sync component.
This module is the single source of truth for all configuration.

Any value can be overridden from the environment, e.g.
`ARCHIVE_SYNC_PATHS__DOWNLOAD_DIR=/mnt/archive`.
"""

from pathlib import Path
from dynaconf import Dynaconf

PROJECT_ROOT = Path(__file__).parent.parent

settings = Dynaconf(
    root_path=PROJECT_ROOT,
    settings_files=["config/settings.toml"],
    envvar_prefix="ARCHIVE_SYNC",
)
