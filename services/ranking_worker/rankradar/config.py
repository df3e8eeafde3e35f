from __future__ import annotations

import os
from dataclasses import dataclass


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    env: str = os.getenv("ENV", "dev")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Where fetched rankings and reports are written
    output_dir: str = os.getenv("OUTPUT_DIR", ".")

    # AhrefsTop
    ahrefs_url: str = os.getenv("AHREFS_URL", "https://ahrefstop.com/websites/taiwan")
    ahrefs_country: str = os.getenv("AHREFS_COUNTRY", "taiwan")

    # Tranco
    tranco_url: str = os.getenv("TRANCO_URL", "https://tranco-list.eu/top-1m.csv.zip")
    tranco_member: str = os.getenv("TRANCO_MEMBER", "top-1m.csv")
    tranco_suffix: str = os.getenv("TRANCO_SUFFIX", ".tw")

    # Cloudflare Radar
    cloudflare_api_base: str = os.getenv(
        "CLOUDFLARE_API_BASE", "https://api.cloudflare.com/client/v4/radar/ranking/top"
    )
    cloudflare_api_token: str = os.getenv("CLOUDFLARE_API_TOKEN", "")
    radar_location: str = os.getenv("RADAR_LOCATION", "TW")
    radar_limit: int = int(os.getenv("RADAR_LIMIT", "100"))

    # HTTP
    http_timeout: float = float(os.getenv("HTTP_TIMEOUT", "60"))
    # Some hosts serve incomplete chains; set to false to skip verification
    http_verify_tls: bool = _flag("HTTP_VERIFY_TLS", "true")

    # Retry/backoff defaults
    retry_max_attempts: int = int(os.getenv("RETRY_MAX_ATTEMPTS", "3"))
    retry_initial_delay: float = float(os.getenv("RETRY_INITIAL_DELAY", "0.5"))
    retry_max_delay: float = float(os.getenv("RETRY_MAX_DELAY", "5"))


settings = Settings()
