"""
Opérations pures sur le LayoutDocument.

Chaque with_* renvoie un LayoutResult :
  - succès → nouveau document, errors vide
  - échec  → document d'ORIGINE (même objet) + errors non vide

Aucune opération ne modifie le document reçu ni ne renvoie un état
partiellement modifié. Les contrôles sont locaux à l'opération : un document
déjà invalide (ex. type inconnu chargé du store) reste éditable, notamment
pour supprimer le bloc fautif.
"""
import copy
import logging
import random
import string
import time
from collections import Counter
from typing import Any, List, Mapping, Optional, Sequence, TypeVar, Union

from pydantic import ValidationError

from ..config import default_theme_name
from ..blocks.registry import HEADER_TYPE, find_type, normalize_type
from ..theme.presets import get_theme_by_name
from .schemas import Block, LayoutDocument, Theme
from .validation import IssueCode, LayoutResult, ValidationIssue, issue, validate, validate_theme

log = logging.getLogger(__name__)

T = TypeVar("T")

_ID_ALPHABET = string.ascii_lowercase + string.digits


# ── Helpers ──────────────────────────────────────────────────────────────────

def generate_block_id() -> str:
    """block_<epoch ms>_<9 caractères base36>"""
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"block_{int(time.time() * 1000)}_{suffix}"


def array_move(items: Sequence[T], old_index: int, new_index: int) -> List[T]:
    """Copie de `items` où l'élément old_index est déplacé en new_index."""
    out = list(items)
    out.insert(new_index, out.pop(old_index))
    return out


def _ok(doc: LayoutDocument) -> LayoutResult:
    return LayoutResult(document=doc)


def _fail(doc: LayoutDocument, *issues: ValidationIssue) -> LayoutResult:
    return LayoutResult(document=doc, errors=list(issues))


def _unknown_block(doc: LayoutDocument, block_id: str) -> LayoutResult:
    return _fail(doc, issue(IssueCode.UNKNOWN_BLOCK, f"Bloc introuvable : {block_id!r}", block_id=block_id))


def _check_config(config_value: Any, block_id: Optional[str] = None) -> Optional[ValidationIssue]:
    if not isinstance(config_value, Mapping):
        return issue(IssueCode.INVALID_CONFIG, "La config d'un bloc doit être un mapping",
                     block_id=block_id, field="config")
    if not all(isinstance(k, str) for k in config_value):
        return issue(IssueCode.INVALID_CONFIG, "Les clés de config doivent être des chaînes",
                     block_id=block_id, field="config")
    return None


def _replace_block(doc: LayoutDocument, index: int, block: Block) -> LayoutDocument:
    blocks = list(doc.blocks)
    blocks[index] = block
    return doc.model_copy(update={"blocks": blocks})


# ── Layout par défaut ────────────────────────────────────────────────────────

DEFAULT_BLOCKS = [
    {"id": "header",       "type": "header"},
    {"id": "friends",      "type": "friends",      "variant": "avatarGrid"},
    {"id": "games",        "type": "games",        "variant": "coverLarge"},
    {"id": "achievements", "type": "achievements", "variant": "grid"},
    {"id": "accounts",     "type": "accounts",     "variant": "grid"},
]


def default_layout(owner_id: str, theme: Optional[Theme] = None) -> LayoutDocument:
    """Layout de démarrage : header + starter set, thème par défaut configuré."""
    return LayoutDocument(
        owner_id=owner_id,
        blocks=[Block(**b) for b in DEFAULT_BLOCKS],
        theme=theme or get_theme_by_name(default_theme_name()),
    )


# ── Opérations ───────────────────────────────────────────────────────────────

def with_block_added(
    doc: LayoutDocument,
    block_type: str,
    variant: Optional[str] = None,
    config: Optional[Mapping[str, Any]] = None,
) -> LayoutResult:
    """Ajoute un bloc en fin de layout (le header, s'il manque, va en tête)."""
    block_type = normalize_type(block_type)
    descriptor = find_type(block_type)
    if descriptor is None:
        return _fail(doc, issue(IssueCode.UNKNOWN_TYPE, f"Type de bloc inconnu : {block_type!r}", field="type"))

    is_header = block_type == HEADER_TYPE
    if is_header and doc.header_ids():
        return _fail(doc, issue(IssueCode.DUPLICATE_HEADER, "Un seul bloc header est autorisé", field="type"))

    variant = variant or descriptor.default_variant
    if descriptor.get_variant(variant) is None:
        return _fail(doc, issue(
            IssueCode.UNKNOWN_VARIANT,
            f"Variant {variant!r} non disponible pour {block_type!r}",
            field="variant",
        ))

    if config is not None:
        bad = _check_config(config)
        if bad:
            return _fail(doc, bad)

    existing = set(doc.block_ids())
    block_id = generate_block_id()
    while block_id in existing:
        block_id = generate_block_id()

    block = Block(id=block_id, type=block_type, variant=variant, config=copy.deepcopy(dict(config or {})))
    blocks = [block, *doc.blocks] if is_header else [*doc.blocks, block]
    return _ok(doc.model_copy(update={"blocks": blocks}))


def with_block_removed(doc: LayoutDocument, block_id: str) -> LayoutResult:
    index = doc.index_of(block_id)
    if index is None:
        return _unknown_block(doc, block_id)
    if doc.blocks[index].is_header:
        return _fail(doc, issue(IssueCode.HEADER_PINNED, "Le header ne peut pas être supprimé", block_id=block_id))
    blocks = [b for i, b in enumerate(doc.blocks) if i != index]
    return _ok(doc.model_copy(update={"blocks": blocks}))


def with_blocks_reordered(doc: LayoutDocument, new_order: Sequence[str]) -> LayoutResult:
    """Remplace l'ordre des blocs. `new_order` doit être une permutation des ids actuels."""
    new_order = list(new_order)
    current = doc.block_ids()
    if not all(isinstance(i, str) for i in new_order) or Counter(new_order) != Counter(current):
        return _fail(doc, issue(
            IssueCode.NOT_A_PERMUTATION,
            "Le nouvel ordre doit contenir exactement les blocs existants",
        ))

    header_ids = doc.header_ids()
    if header_ids and new_order[0] != header_ids[0]:
        return _fail(doc, issue(
            IssueCode.HEADER_PINNED,
            "Le header doit rester en première position",
            block_id=header_ids[0],
        ))

    if new_order == current:
        return _ok(doc)

    # doublons d'id possibles sur un document déjà invalide : ordre d'apparition
    pool: dict = {}
    for b in doc.blocks:
        pool.setdefault(b.id, []).append(b)
    blocks = [pool[block_id].pop(0) for block_id in new_order]
    return _ok(doc.model_copy(update={"blocks": blocks}))


def with_block_moved(doc: LayoutDocument, block_id: str, to_index: int) -> LayoutResult:
    """Déplace un bloc (sémantique arrayMove) puis délègue à with_blocks_reordered."""
    index = doc.index_of(block_id)
    if index is None:
        return _unknown_block(doc, block_id)
    if not 0 <= to_index < len(doc.blocks):
        return _fail(doc, issue(
            IssueCode.INDEX_OUT_OF_RANGE,
            f"Position {to_index} hors limites (0..{len(doc.blocks) - 1})",
            block_id=block_id,
        ))
    return with_blocks_reordered(doc, array_move(doc.block_ids(), index, to_index))


def with_variant_set(doc: LayoutDocument, block_id: str, variant: str) -> LayoutResult:
    index = doc.index_of(block_id)
    if index is None:
        return _unknown_block(doc, block_id)
    block = doc.blocks[index]
    descriptor = find_type(block.type)
    if descriptor is None:
        return _fail(doc, issue(
            IssueCode.UNKNOWN_TYPE,
            f"Type de bloc inconnu : {block.type!r}",
            block_id=block_id, field="type",
        ))
    if descriptor.get_variant(variant) is None:
        return _fail(doc, issue(
            IssueCode.UNKNOWN_VARIANT,
            f"Variant {variant!r} non disponible pour {block.type!r} "
            f"(disponibles : {', '.join(descriptor.variant_ids)})",
            block_id=block_id, field="variant",
        ))
    if block.variant == variant:
        return _ok(doc)
    return _ok(_replace_block(doc, index, block.model_copy(update={"variant": variant})))


def with_config_set(doc: LayoutDocument, block_id: str, config: Mapping[str, Any]) -> LayoutResult:
    """Remplace la config opaque d'un bloc (contenu non interprété)."""
    index = doc.index_of(block_id)
    if index is None:
        return _unknown_block(doc, block_id)
    bad = _check_config(config, block_id)
    if bad:
        return _fail(doc, bad)
    block = doc.blocks[index]
    return _ok(_replace_block(doc, index, block.model_copy(update={"config": copy.deepcopy(dict(config))})))


def with_theme_set(doc: LayoutDocument, theme: Union[Theme, Mapping[str, Any]]) -> LayoutResult:
    if not isinstance(theme, Theme):
        try:
            theme = Theme.model_validate(theme)
        except ValidationError as e:
            return _fail(doc, issue(IssueCode.INVALID_THEME, f"Thème mal formé : {e.error_count()} erreur(s)", field="theme"))
    problems = validate_theme(theme)
    if problems:
        return _fail(doc, *problems)
    if theme == doc.theme:
        return _ok(doc)
    return _ok(doc.model_copy(update={"theme": theme}))


def with_content_replaced(
    doc: LayoutDocument,
    blocks: Sequence[Union[Block, Mapping[str, Any]]],
    theme: Optional[Union[Theme, Mapping[str, Any]]] = None,
) -> LayoutResult:
    """
    Remplace blocs (+ thème) d'un coup — sauvegarde complète d'un éditeur.
    Tout ou rien : le candidat doit passer validate() en entier, et un bloc
    déjà présent (même id) garde son type.
    """
    try:
        new_blocks = [b if isinstance(b, Block) else Block.model_validate(b) for b in blocks]
    except ValidationError as e:
        return _fail(doc, issue(IssueCode.INVALID_CONFIG, f"Blocs mal formés : {e.error_count()} erreur(s)",
                                field="blocks"))

    new_theme = doc.theme
    if theme is not None:
        try:
            new_theme = theme if isinstance(theme, Theme) else Theme.model_validate(theme)
        except ValidationError as e:
            return _fail(doc, issue(IssueCode.INVALID_THEME, f"Thème mal formé : {e.error_count()} erreur(s)",
                                    field="theme"))

    changed = _type_changes(doc, new_blocks)
    if changed:
        return _fail(doc, *changed)

    candidate = doc.model_copy(update={"blocks": new_blocks, "theme": new_theme})
    problems = validate(candidate)
    if problems:
        return _fail(doc, *problems)
    return _ok(candidate)



def _type_changes(doc: LayoutDocument, new_blocks: Sequence[Block]) -> List[ValidationIssue]:
    """Le type d'un bloc est fixé à sa création (alias historiques tolérés)."""
    issues: List[ValidationIssue] = []
    for b in new_blocks:
        current = doc.get_block(b.id)
        if current is not None and normalize_type(current.type) != normalize_type(b.type):
            issues.append(issue(
                IssueCode.TYPE_CHANGED,
                f"Le bloc {b.id!r} ne peut pas passer de {current.type!r} à {b.type!r}",
                block_id=b.id, field="type",
            ))
    return issues

# ── Hydratation ──────────────────────────────────────────────────────────────

def normalize_document(doc: LayoutDocument) -> LayoutDocument:
    """
    Passe d'hydratation appliquée au chargement :
      - alias de type historiques renommés (spotify-tracks → music-tracks)
      - variant inconnu d'un type connu → variant par défaut du type
    Les types inconnus sont conservés tels quels (repli côté renderer).
    """
    blocks: List[Block] = []
    changed = False
    for b in doc.blocks:
        block = b
        current_type = normalize_type(b.type)
        if current_type != b.type:
            block = block.model_copy(update={"type": current_type})
        descriptor = find_type(current_type)
        if descriptor is None:
            log.warning("Layout %s : bloc %s de type inconnu %r conservé", doc.owner_id, b.id, b.type)
        elif block.variant is not None and descriptor.get_variant(block.variant) is None:
            log.warning(
                "Layout %s : variant %r inconnu pour %s (bloc %s), repli sur %r",
                doc.owner_id, block.variant, current_type, b.id, descriptor.default_variant,
            )
            block = block.model_copy(update={"variant": descriptor.default_variant})
        changed = changed or block is not b
        blocks.append(block)
    return doc.model_copy(update={"blocks": blocks}) if changed else doc
