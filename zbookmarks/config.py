from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel

# Load environment variables from .env (if present)
load_dotenv()

logger = logging.getLogger("zbookmarks.config")


def env_flag(name: str, default: bool) -> bool:
    """Read a 'true'/'false' environment value, falling back on anything else."""
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    normalized = value.strip().lower()
    if normalized in ("true", "false"):
        return normalized == "true"
    logger.warning(
        f"'{name}' config value must be 'true' or 'false', but it's '{value}'. "
        f"The {str(default).lower()} is used."
    )
    return default


class Settings(BaseModel):
    # Directory the bookmarks document lives in (the host's cwd)
    cwd: str = os.getenv("ZBOOKMARKS_CWD", "/host")

    # Document file name, relative to cwd
    filename: str = os.getenv("ZBOOKMARKS_FILENAME", "") or ".zellij_bookmarks.yaml"

    # Effective knobs for resolution and filtering
    exec: bool = env_flag("ZBOOKMARKS_EXEC", False)
    ignore_case: bool = env_flag("ZBOOKMARKS_IGNORE_CASE", True)
    autodetect_filter_mode: bool = env_flag("ZBOOKMARKS_AUTODETECT_FILTER_MODE", True)

    # Configurable key chords, e.g. "Ctrl e"; empty keeps the default
    bind_edit: str = os.getenv("ZBOOKMARKS_BIND_EDIT", "")
    bind_reload: str = os.getenv("ZBOOKMARKS_BIND_RELOAD", "")
    bind_switch_filter_label: str = os.getenv("ZBOOKMARKS_BIND_SWITCH_FILTER_LABEL", "")
    bind_switch_filter_id: str = os.getenv("ZBOOKMARKS_BIND_SWITCH_FILTER_ID", "")
    bind_describe: str = os.getenv("ZBOOKMARKS_BIND_DESCRIBE", "")

    # API key for the host adapter (sent via X-API-Key header)
    api_key: str = os.getenv("ZBOOKMARKS_API_KEY", "")

    # CORS origins (comma-separated or "*")
    cors_origins: str = os.getenv("CORS_ORIGINS", "*")

    log_level: str = os.getenv("ZBOOKMARKS_LOG_LEVEL", "INFO")

    def bookmarks_path(self) -> Path:
        return Path(self.cwd) / self.filename

    def keybinding_config(self) -> Dict[str, Optional[str]]:
        return {
            "edit": self.bind_edit,
            "reload": self.bind_reload,
            "switch_filter_label": self.bind_switch_filter_label,
            "switch_filter_id": self.bind_switch_filter_id,
            "describe": self.bind_describe,
        }


settings = Settings()
