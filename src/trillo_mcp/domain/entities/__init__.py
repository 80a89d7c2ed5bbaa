"""Domain entities - Data Transfer Objects and result types.

Only the result types are re-exported here; entity modules import the error
taxonomy, which itself depends on the result types.
"""

from trillo_mcp.domain.entities.result_types import (
    DomainError,
    DomainErrorType,
    DomainResult,
    DomainSuccess,
)

__all__ = [
    "DomainError",
    "DomainErrorType",
    "DomainResult",
    "DomainSuccess",
]
