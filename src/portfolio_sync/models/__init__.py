"""Data models and type definitions"""

from portfolio_sync.models.errors import (
    ConfigurationError,
    FrontmatterParseError,
    TransportError,
)
from portfolio_sync.models.frontmatter import RawFrontmatter
from portfolio_sync.models.project import OrderingOverride, PortfolioDataset, ProjectRecord
from portfolio_sync.models.sync import (
    FieldViolation,
    NormalizationResult,
    OutcomeKind,
    SyncOutcome,
    SyncReport,
)

__all__ = [
    "ConfigurationError",
    "FieldViolation",
    "FrontmatterParseError",
    "NormalizationResult",
    "OrderingOverride",
    "OutcomeKind",
    "PortfolioDataset",
    "ProjectRecord",
    "RawFrontmatter",
    "SyncOutcome",
    "SyncReport",
    "TransportError",
]
