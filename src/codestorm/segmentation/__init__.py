"""Code segmentation: split a generated blob into discrete files."""

from .detectors import ContentHasher, LanguageDetector
from .indicators import DEFAULT_THRESHOLD, count_indicators, needs_segmentation
from .inference import infer_identity
from .models import FileIdentity, SplitResult
from .splitter import DEFAULT_MIN_LENGTH, CodeSplitter

__all__ = [
    "CodeSplitter",
    "ContentHasher",
    "DEFAULT_MIN_LENGTH",
    "DEFAULT_THRESHOLD",
    "FileIdentity",
    "LanguageDetector",
    "SplitResult",
    "count_indicators",
    "infer_identity",
    "needs_segmentation",
]
