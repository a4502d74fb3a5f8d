"""Application configuration loaded from environment variables."""

import os
from dataclasses import dataclass, field

THREADING_FINAL_PASS = "final_pass"
THREADING_PER_BATCH = "per_batch"


@dataclass(frozen=True)
class AppConfig:
    """Centralized application configuration.

    Required fields have no defaults and will cause a KeyError at startup
    if the corresponding environment variable is missing. Domain constants
    have sensible defaults but can be overridden via environment variables.
    """

    # Required — no defaults, fail at startup if missing
    access_token: str
    storage_connection_string: str

    # Domain constants — defaults provided, overridable via env
    base_url: str = "https://api.frame.io/v2"
    page_size: int = 100
    max_concurrency: int = 8
    request_timeout_seconds: float = 30.0
    sweep_team_ids: tuple[str, ...] = field(default_factory=tuple)
    continuation_container: str = "frameio-sync-state"
    continuation_blob: str = "project-sweep/continuation.json"
    comment_threading: str = THREADING_FINAL_PASS


def _split_ids(raw: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def load_config() -> AppConfig:
    """Construct an AppConfig from environment variables.

    Required environment variables:
        FIO_ACCESS_TOKEN: Frame.io bearer token used when a request carries none.
        AzureWebJobsStorage: Azure Storage account connection string.

    Optional environment variables (with defaults):
        FIO_BASE_URL: Frame.io API base URL (default: https://api.frame.io/v2).
        FIO_PAGE_SIZE: Projects requested per team page (default: 100).
        FIO_MAX_CONCURRENCY: Max in-flight Frame.io requests (default: 8).
        FIO_REQUEST_TIMEOUT_SECONDS: Per-request timeout (default: 30).
        FIO_SWEEP_TEAM_IDS: Comma-separated team IDs for the scheduled sweep
            (default: empty, meaning every visible team).
        FIO_CONTINUATION_CONTAINER: Blob container for the sweep continuation.
        FIO_CONTINUATION_BLOB: Blob path for the sweep continuation.
        FIO_COMMENT_THREADING: Reply threading mode, final_pass or per_batch.

    Returns:
        Configured AppConfig instance.

    Raises:
        ValueError: If FIO_COMMENT_THREADING names an unknown mode.
    """
    threading = os.environ.get("FIO_COMMENT_THREADING", THREADING_FINAL_PASS)
    if threading not in (THREADING_FINAL_PASS, THREADING_PER_BATCH):
        raise ValueError(f"Unknown FIO_COMMENT_THREADING mode: {threading}")

    return AppConfig(
        access_token=os.environ["FIO_ACCESS_TOKEN"],
        storage_connection_string=os.environ["AzureWebJobsStorage"],  # noqa: SIM112
        base_url=os.environ.get("FIO_BASE_URL", "https://api.frame.io/v2"),
        page_size=int(os.environ.get("FIO_PAGE_SIZE", "100")),
        max_concurrency=int(os.environ.get("FIO_MAX_CONCURRENCY", "8")),
        request_timeout_seconds=float(os.environ.get("FIO_REQUEST_TIMEOUT_SECONDS", "30")),
        sweep_team_ids=_split_ids(os.environ.get("FIO_SWEEP_TEAM_IDS", "")),
        continuation_container=os.environ.get(
            "FIO_CONTINUATION_CONTAINER", "frameio-sync-state"
        ),
        continuation_blob=os.environ.get(
            "FIO_CONTINUATION_BLOB", "project-sweep/continuation.json"
        ),
        comment_threading=threading,
    )
