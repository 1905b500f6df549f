"""Core — schémas du document, validation, opérations pures."""
from .schemas import COLOR_SLOTS, Block, LayoutDocument, Theme, ThemeColors
from .validation import (
    IssueCode,
    LayoutResult,
    ValidationIssue,
    validate,
    validate_theme,
)
from .operations import (
    DEFAULT_BLOCKS,
    array_move,
    default_layout,
    generate_block_id,
    normalize_document,
    with_block_added,
    with_block_moved,
    with_block_removed,
    with_blocks_reordered,
    with_config_set,
    with_content_replaced,
    with_theme_set,
    with_variant_set,
)

__all__ = [
    "COLOR_SLOTS", "Block", "LayoutDocument", "Theme", "ThemeColors",
    "IssueCode", "LayoutResult", "ValidationIssue", "validate", "validate_theme",
    "DEFAULT_BLOCKS", "array_move", "default_layout", "generate_block_id",
    "normalize_document",
    "with_block_added", "with_block_moved", "with_block_removed",
    "with_blocks_reordered", "with_config_set", "with_content_replaced",
    "with_theme_set", "with_variant_set",
]
