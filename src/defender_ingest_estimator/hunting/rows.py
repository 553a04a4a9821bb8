"""
Typed access to advanced hunting result rows.

The API returns each row as a JSON object keyed by column name with no
declared schema on the Python side. HuntingRow gives explicit, optional
lookups and numeric coercion instead of relying on dict indexing.
"""

from __future__ import annotations

import json
import math
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, eq=False)
class HuntingRow(Mapping[str, Any]):
    """One result row of a hunting query."""

    data: Mapping[str, Any] = field(default_factory=dict)

    def __getitem__(self, key: str) -> Any:
        return self.data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.data)

    def __len__(self) -> int:
        return len(self.data)

    def get_int(self, name: str) -> int | None:
        """
        Coerce a column to int.

        Returns None when the column is missing, null, boolean, NaN or not
        numeric. Numeric strings ("42", "42.0") are accepted.
        """
        value = self.data.get(name)
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        try:
            number = float(value)
        except (TypeError, ValueError):
            return None
        if math.isnan(number) or math.isinf(number):
            return None
        return int(number)

    def as_record(self) -> dict[str, Any]:
        """
        Flatten to a CSV-ready dict.

        Nested objects and arrays (e.g. AdditionalFields) are serialized to
        compact JSON so the exported size reflects their content.
        """
        return {
            name: json.dumps(value, separators=(",", ":"))
            if isinstance(value, (dict, list))
            else value
            for name, value in self.data.items()
        }


def rows_from_results(results: list[Any] | None) -> list[HuntingRow]:
    """Wrap the API's Results array, ignoring entries that are not objects."""
    if not results:
        return []
    return [HuntingRow(dict(item)) for item in results if isinstance(item, dict)]
