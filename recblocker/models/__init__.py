"""Pydantic models for data validation and serialization."""

from .schemas import (
    BatchReport,
    BlockerConfig,
    BlockResult,
    ExpandMode,
    ExtractionResult,
    FailureKind,
    RunState,
    SessionContext,
)

__all__ = [
    "BatchReport",
    "BlockerConfig",
    "BlockResult",
    "ExpandMode",
    "ExtractionResult",
    "FailureKind",
    "RunState",
    "SessionContext",
]
