"""
Blocs — registry des types + descripteurs de variants.
"""
from .registry import (
    HEADER_TYPE,
    BLOCK_DEFINITIONS,
    LEGACY_TYPE_ALIASES,
    VariantDescriptor,
    TypeDescriptor,
    list_types,
    find_type,
    get_type,
    is_valid_variant,
    default_variant,
    normalize_type,
)

__all__ = [
    "HEADER_TYPE", "BLOCK_DEFINITIONS", "LEGACY_TYPE_ALIASES",
    "VariantDescriptor", "TypeDescriptor",
    "list_types", "find_type", "get_type",
    "is_valid_variant", "default_variant", "normalize_type",
]
