"""Grid text transformation engine: codec, reflow, history, export, validation."""

from .charset import (
    ALLOWED_CHARACTERS,
    BufferClassification,
    CharClass,
    CharacterValidator,
    classify,
)
from .codec import CollapseLoss, GridCodec, collapse, expand
from .dimensions import ConfigurationError, GridDimensions
from .export import ExportNormalizer, normalize_for_export
from .history import UndoRedoHistory
from .reflow import ReflowEngine, ReflowResult, ReflowState

__all__ = [
    "ALLOWED_CHARACTERS",
    "BufferClassification",
    "CharClass",
    "CharacterValidator",
    "classify",
    "CollapseLoss",
    "GridCodec",
    "collapse",
    "expand",
    "ConfigurationError",
    "GridDimensions",
    "ExportNormalizer",
    "normalize_for_export",
    "UndoRedoHistory",
    "ReflowEngine",
    "ReflowResult",
    "ReflowState",
]
