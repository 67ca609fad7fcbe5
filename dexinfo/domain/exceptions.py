from __future__ import annotations


class DomainError(Exception):
    """Base for domain errors."""


class SourceUnavailableError(DomainError):
    """An upstream data source failed to answer."""


class TokenMetricsInputError(DomainError):
    """Invalid parameters for token metrics aggregation."""


class PositionsInputError(DomainError):
    """Invalid parameters for position valuation."""


class TransactionsInputError(DomainError):
    """Invalid parameters for the user transaction listing."""
