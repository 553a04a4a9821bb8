"""
Run parameters collected from the operator.

Input is permissive: malformed values are clamped or defaulted, never
rejected, so an operator can always press Enter through the prompts.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal

from defender_ingest_estimator.config.tables import normalize_tables
from defender_ingest_estimator.estimator.queries import lookback_period

SampleMethod = Literal["take", "sample"]

MIN_LOOKBACK_DAYS = 1
MIN_SAMPLE_SIZE = 1
MAX_SAMPLE_SIZE = 100_000
DEFAULT_SAMPLE_SIZE = 10_000
DEFAULT_SAMPLE_METHOD: SampleMethod = "sample"


@dataclass(frozen=True)
class EstimationRequest:
    """Normalized parameters for one estimation run."""

    lookback_days: int
    sample_size: int
    sample_method: SampleMethod
    tables: tuple[str, ...] = ()

    @property
    def lookback_period(self) -> str:
        """KQL timespan token for the lookback window, e.g. ``ago(7d)``."""
        return lookback_period(self.lookback_days)


def _parse_int(raw: str | int | None) -> int | None:
    if raw is None:
        return None
    try:
        return int(str(raw).strip())
    except ValueError:
        return None


def parse_lookback_days(raw: str | int | None) -> int:
    """Parse lookback days; unparseable or < 1 becomes 1."""
    value = _parse_int(raw)
    if value is None or value < MIN_LOOKBACK_DAYS:
        return MIN_LOOKBACK_DAYS
    return value


def parse_sample_size(raw: str | int | None) -> int:
    """
    Parse sample size.

    Blank or unparseable input defaults to 10000; anything else is clamped
    into [1, 100000].
    """
    if raw is None or str(raw).strip() == "":
        return DEFAULT_SAMPLE_SIZE
    value = _parse_int(raw)
    if value is None:
        return DEFAULT_SAMPLE_SIZE
    return max(MIN_SAMPLE_SIZE, min(MAX_SAMPLE_SIZE, value))


def parse_sample_method(raw: str | None) -> SampleMethod:
    """Normalize sample method; anything other than 'take' becomes 'sample'."""
    if raw is None:
        return DEFAULT_SAMPLE_METHOD
    method = raw.strip().lower()
    if method == "take":
        return "take"
    return DEFAULT_SAMPLE_METHOD


def build_request(
    lookback_days: str | int | None,
    sample_size: str | int | None,
    sample_method: str | None,
    tables: tuple[str, ...] = (),
) -> EstimationRequest:
    """
    Normalize raw operator input into an EstimationRequest.

    Repeated table names are dropped, keeping first occurrence order.
    """
    return EstimationRequest(
        lookback_days=parse_lookback_days(lookback_days),
        sample_size=parse_sample_size(sample_size),
        sample_method=parse_sample_method(sample_method),
        tables=normalize_tables(tables) if tables else (),
    )


def prompt_request(
    tables: tuple[str, ...] = (),
    input_fn: Callable[[str], str] = input,
) -> EstimationRequest:
    """
    Ask the operator for the three run parameters.

    Args:
        tables: Configured table list carried into the request
        input_fn: Prompt function (tests pass a scripted replacement)

    Returns:
        Normalized EstimationRequest
    """

    def ask(prompt: str) -> str:
        try:
            return input_fn(prompt)
        except EOFError:
            return ""

    lookback = ask("Lookback period in days (e.g. 7): ")
    size = ask(f"Sample size per table [{DEFAULT_SAMPLE_SIZE}]: ")
    method = ask(f"Sample method (take/sample) [{DEFAULT_SAMPLE_METHOD}]: ")
    return build_request(lookback, size, method, tables=tables)
