"""
Advanced hunting table list.

The default list covers the Defender XDR tables that are typically
streamed to a downstream analytics workspace. A YAML file with a
top-level ``tables`` list replaces it:

    tables:
      - DeviceProcessEvents
      - DeviceNetworkEvents
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from defender_ingest_estimator.exceptions import ConfigurationError

DEFAULT_TABLES: tuple[str, ...] = (
    # Endpoints
    "DeviceEvents",
    "DeviceFileCertificateInfo",
    "DeviceFileEvents",
    "DeviceImageLoadEvents",
    "DeviceInfo",
    "DeviceLogonEvents",
    "DeviceNetworkEvents",
    "DeviceNetworkInfo",
    "DeviceProcessEvents",
    "DeviceRegistryEvents",
    # Email and collaboration
    "EmailAttachmentInfo",
    "EmailEvents",
    "EmailPostDeliveryEvents",
    "EmailUrlInfo",
    "UrlClickEvents",
    # Identities and cloud apps
    "IdentityDirectoryEvents",
    "IdentityLogonEvents",
    "IdentityQueryEvents",
    "CloudAppEvents",
    # Alerts
    "AlertEvidence",
    "AlertInfo",
)


def normalize_tables(tables: list[Any] | tuple[Any, ...]) -> tuple[str, ...]:
    """
    Strip blanks and drop repeated names, keeping first occurrence order.

    Raises:
        ConfigurationError: If an entry is not a string or nothing remains
    """
    seen: set[str] = set()
    result: list[str] = []
    for entry in tables:
        if not isinstance(entry, str):
            raise ConfigurationError(f"Table names must be strings, got {entry!r}")
        name = entry.strip()
        if name and name not in seen:
            seen.add(name)
            result.append(name)

    if not result:
        raise ConfigurationError("Table list is empty")
    return tuple(result)


def load_tables(path: str | Path) -> tuple[str, ...]:
    """
    Load the table list from a YAML file.

    Args:
        path: YAML file with a top-level ``tables`` list

    Returns:
        Ordered, de-duplicated table names

    Raises:
        ConfigurationError: If the file is missing, malformed or has no tables
    """
    table_path = Path(path)
    if not table_path.exists():
        raise ConfigurationError(f"Table list file not found: {table_path}")

    try:
        data = yaml.safe_load(table_path.read_text())
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {table_path}: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("tables"), list):
        raise ConfigurationError(
            f"{table_path} must contain a top-level 'tables' list"
        )

    return normalize_tables(data["tables"])
