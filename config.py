"""
Central configuration for the procurement desk.

All endpoints, credentials, display settings and output paths are defined here.
Override via environment variables or by passing a Config instance directly.

Settings priority (highest wins):
  1. config/desk_settings.json  (admin-editable, persisted)
  2. Environment variables
  3. Hardcoded defaults in this file
"""
import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

# Project root (directory containing this file)
PROJECT_ROOT = Path(__file__).parent

DEFAULT_API_BASE_URL = "http://localhost:5000/api"
DEFAULT_OUTPUT_DIR   = PROJECT_ROOT / "output"
DEFAULT_EXPORT_DIR   = DEFAULT_OUTPUT_DIR / "export"


@dataclass
class Config:
    # --- Backend API ---
    api_base_url: str = field(
        default_factory=lambda: os.getenv("API_BASE_URL", DEFAULT_API_BASE_URL).rstrip("/")
    )
    api_token: Optional[str] = field(
        default_factory=lambda: os.getenv("API_TOKEN")
    )
    # Bearer token issued by the auth service; requests fail fast without it.
    request_timeout: float = field(
        default_factory=lambda: float(os.getenv("REQUEST_TIMEOUT", "30"))
    )

    # --- Display ---
    company_name:      str = field(default_factory=lambda: os.getenv("COMPANY_NAME", "Company"))
    currency_code:     str = field(default_factory=lambda: os.getenv("CURRENCY_CODE", "OMR"))
    currency_decimals: int = 3      # OMR uses baisa (1/1000)
    user_name:         str = field(default_factory=lambda: os.getenv("DESK_USER", "System"))

    # --- Output ---
    export_dir: Path = field(
        default_factory=lambda: Path(os.getenv("EXPORT_DIR", str(DEFAULT_EXPORT_DIR)))
    )

    def __post_init__(self) -> None:
        """Overlay runtime-tunable settings from desk_settings.json if present."""
        config_dir = Path(os.getenv("CONFIG_DIR", str(PROJECT_ROOT / "config")))
        settings_file = config_dir / "desk_settings.json"
        if not settings_file.exists():
            return
        _type_map: dict[str, type] = {
            "api_base_url":      str,
            "request_timeout":   float,
            "company_name":      str,
            "currency_code":     str,
            "currency_decimals": int,
            "user_name":         str,
        }
        try:
            with open(settings_file, encoding="utf-8") as f:
                overrides = {k: v for k, v in json.load(f).items() if not k.startswith("_")}
            for key, val in overrides.items():
                if key in _type_map and hasattr(self, key):
                    setattr(self, key, _type_map[key](val))
        except Exception as exc:
            logger.warning("Failed to load desk_settings.json: %s", exc)
        self.api_base_url = self.api_base_url.rstrip("/")

    def ensure_export_dir(self) -> None:
        self.export_dir.mkdir(parents=True, exist_ok=True)
