"""
Exception hierarchy for defender-ingest-estimator.

Only configuration and authentication errors reach the CLI. Query and
export errors are caught at the per-table boundary and turned into
table outcomes.
"""


class EstimatorError(Exception):
    """Base exception for all defender-ingest-estimator errors."""


class ConfigurationError(EstimatorError):
    """Raised when configuration is invalid or missing."""


class CredentialError(ConfigurationError):
    """Raised when app registration credentials cannot be resolved."""


class AuthenticationError(EstimatorError):
    """Raised when an access token cannot be obtained."""


class APIError(EstimatorError):
    """Raised when the advanced hunting API returns an error."""


class RateLimitError(APIError):
    """Raised when the advanced hunting API rate limit is exceeded."""


class QueryError(APIError):
    """Raised when a hunting query fails."""


class ExportError(EstimatorError):
    """Raised when a sample or summary file cannot be written."""
