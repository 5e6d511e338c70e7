"""Configuration via environment variables with cloud-native secret support.

Supports:
  - Environment variables (local dev)
  - .env files
  - AWS Secrets Manager (aws-secret://name#key) for the access token
  - GCP Secret Manager (gcp-secret://name) for the access token
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

from scripts.authormap.secrets import resolve_secret


@dataclass(frozen=True)
class ServerConfig:
    url: str
    token: str
    api_version: str = "6.0"
    request_timeout: float = 30.0
    max_retries: int = 5  # throttled (HTTP 429) requests only


@dataclass(frozen=True)
class OutputConfig:
    authors_file: str = "Authors.txt"


@dataclass(frozen=True)
class AuthorMapConfig:
    server: ServerConfig
    output: OutputConfig = field(default_factory=OutputConfig)
    log_level: str = "INFO"


def load_config(
    server_url: Optional[str] = None,
    authors_file: Optional[str] = None,
) -> AuthorMapConfig:
    """Load configuration from environment variables.

    Explicit arguments (from the command line) take precedence over the
    environment. The token may be a cloud secret reference.
    """
    load_dotenv()

    url = server_url or os.environ.get("ADO_SERVER_URL", "")
    if not url:
        raise ValueError("ADO_SERVER_URL environment variable is required")

    token_raw = os.environ.get("ADO_PAT", "")
    if not token_raw:
        raise ValueError("ADO_PAT environment variable is required")

    server = ServerConfig(
        url=url.rstrip("/"),
        token=resolve_secret(token_raw),
        api_version=os.environ.get("ADO_API_VERSION", "6.0"),
        request_timeout=float(os.environ.get("ADO_REQUEST_TIMEOUT", "30")),
        max_retries=int(os.environ.get("ADO_MAX_RETRIES", "5")),
    )

    output = OutputConfig(
        authors_file=authors_file or os.environ.get("AUTHORS_FILE", "Authors.txt"),
    )

    return AuthorMapConfig(
        server=server,
        output=output,
        log_level=os.environ.get("LOG_LEVEL", "INFO"),
    )
