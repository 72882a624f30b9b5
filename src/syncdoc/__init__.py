"""syncdoc -- format-preserving documentation merge for Rust sources."""

__version__ = "0.1.0"

from syncdoc.formatter import EncodingError, FormatterFailed, MergeError  # noqa: E402
from syncdoc.merge import (  # noqa: E402
    DocMerger,
    MergeDirection,
    MergePlan,
    migrate_merge,
    restore_merge,
)

__all__ = [
    "DocMerger",
    "EncodingError",
    "FormatterFailed",
    "MergeDirection",
    "MergeError",
    "MergePlan",
    "__version__",
    "migrate_merge",
    "restore_merge",
]
