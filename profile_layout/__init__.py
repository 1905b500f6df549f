"""
Profile Layout v1.0 — composition de pages de profil en blocs.

Usage :
    >>> from profile_layout import LayoutComposer, InMemoryLayoutStore
    >>> composer = LayoutComposer(InMemoryLayoutStore(), "user-42")
    >>> await composer.load()                      # layout par défaut si absent
    >>> composer.add_block("gallery")
    >>> composer.set_variant("games", "carousel")
    >>> await composer.commit()

Usage (opérations pures) :
    >>> from profile_layout import default_layout, with_block_added, validate
    >>> result = with_block_added(default_layout("user-42"), "stream")
    >>> result.ok, validate(result.document)
"""
from .errors import (
    ProfileLayoutError,
    RegistryLookupError,
    StoreError,
    ComposerStateError,
    CommitRejected,
)

# ── registry ─────────────────────────────────────────────────────────────────
from .blocks import (
    HEADER_TYPE,
    BLOCK_DEFINITIONS,
    VariantDescriptor,
    TypeDescriptor,
    list_types,
    find_type,
    get_type,
    is_valid_variant,
    default_variant,
    normalize_type,
)

# ── document (core avant theme : ordre d'import requis) ──────────────────────
from .core import (
    Block,
    LayoutDocument,
    Theme,
    ThemeColors,
    IssueCode,
    LayoutResult,
    ValidationIssue,
    validate,
    default_layout,
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

# ── thèmes ───────────────────────────────────────────────────────────────────
from .theme import (
    DEFAULT_THEME,
    THEME_PRESETS,
    TokenSet,
    resolve,
    get_theme_by_name,
    create_custom_theme,
    create_theme,
    is_valid_hex,
)

# ── session d'édition ────────────────────────────────────────────────────────
from .store import LayoutStore, SaveReceipt, InMemoryLayoutStore, SqlLayoutStore
from .composer import ComposerState, LayoutComposer
from .drag import DragState, DragReorderController, DropOutcome
from .render import RenderBlock, RenderPlan, build_render_plan

__version__ = "1.0.0"

__all__ = [
    # erreurs
    "ProfileLayoutError", "RegistryLookupError", "StoreError",
    "ComposerStateError", "CommitRejected",
    # registry
    "HEADER_TYPE", "BLOCK_DEFINITIONS", "VariantDescriptor", "TypeDescriptor",
    "list_types", "find_type", "get_type", "is_valid_variant",
    "default_variant", "normalize_type",
    # document
    "Block", "LayoutDocument", "Theme", "ThemeColors",
    "IssueCode", "LayoutResult", "ValidationIssue", "validate",
    "default_layout", "normalize_document",
    "with_block_added", "with_block_moved", "with_block_removed",
    "with_blocks_reordered", "with_config_set", "with_content_replaced",
    "with_theme_set", "with_variant_set",
    # thèmes
    "DEFAULT_THEME", "THEME_PRESETS", "TokenSet", "resolve",
    "get_theme_by_name", "create_custom_theme", "create_theme", "is_valid_hex",
    # session
    "LayoutStore", "SaveReceipt", "InMemoryLayoutStore", "SqlLayoutStore",
    "ComposerState", "LayoutComposer",
    "DragState", "DragReorderController", "DropOutcome",
    "RenderBlock", "RenderPlan", "build_render_plan",
]
