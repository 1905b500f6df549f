"""
Validation du LayoutDocument.

Les erreurs de validation sont des résultats, pas des exceptions : elles
arrivent à chaque glisser-déposer maladroit. Chaque ValidationIssue indique
le bloc et/ou le champ fautif pour que l'interface puisse les pointer.

Invariants vérifiés :
  - ids non vides et uniques
  - exactement un bloc header, en position 0
  - variant enregistré pour le type du bloc (si présent)
  - type connu du registry
  - couleurs du thème en hex valide
"""
from collections import Counter
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..blocks.registry import HEADER_TYPE, find_type
from ..theme.colors import is_valid_hex
from .schemas import COLOR_SLOTS, LayoutDocument, Theme


class IssueCode(str, Enum):
    UNKNOWN_TYPE      = "UNKNOWN_TYPE"
    UNKNOWN_VARIANT   = "UNKNOWN_VARIANT"
    UNKNOWN_BLOCK     = "UNKNOWN_BLOCK"
    EMPTY_ID          = "EMPTY_ID"
    DUPLICATE_ID      = "DUPLICATE_ID"
    MISSING_HEADER    = "MISSING_HEADER"
    DUPLICATE_HEADER  = "DUPLICATE_HEADER"
    HEADER_NOT_FIRST  = "HEADER_NOT_FIRST"
    HEADER_PINNED     = "HEADER_PINNED"
    NOT_A_PERMUTATION = "NOT_A_PERMUTATION"
    INDEX_OUT_OF_RANGE = "INDEX_OUT_OF_RANGE"
    INVALID_CONFIG    = "INVALID_CONFIG"
    INVALID_COLOR     = "INVALID_COLOR"
    INVALID_THEME     = "INVALID_THEME"
    TYPE_CHANGED      = "TYPE_CHANGED"


class ValidationIssue(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: IssueCode
    message: str
    block_id: Optional[str] = None
    field: Optional[str] = None


class LayoutResult(BaseModel):
    """
    Résultat d'une opération with_*.

    En cas d'échec, `document` est le document d'origine (inchangé) et
    `errors` n'est jamais vide.
    """
    model_config = ConfigDict(frozen=True)

    document: LayoutDocument
    errors: List[ValidationIssue] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def issue(code: IssueCode, message: str, block_id: Optional[str] = None,
          field: Optional[str] = None) -> ValidationIssue:
    return ValidationIssue(code=code, message=message, block_id=block_id, field=field)


def validate_theme(theme: Theme) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    colors = theme.colors
    for slot in COLOR_SLOTS:
        value = getattr(colors, slot)
        values = value if slot == "bg_gradient" else (value,)
        for i, v in enumerate(values):
            if not is_valid_hex(v):
                where = f"theme.colors.{slot}" + (f"[{i}]" if slot == "bg_gradient" else "")
                issues.append(issue(
                    IssueCode.INVALID_COLOR,
                    f"Couleur invalide pour {where} : {v!r} (attendu #RRGGBB ou #RRGGBBAA)",
                    field=where,
                ))
    return issues


def validate(doc: LayoutDocument) -> List[ValidationIssue]:
    """Liste des violations d'invariants ; liste vide = document valide."""
    issues: List[ValidationIssue] = []

    # ── ids ──
    counts = Counter(b.id for b in doc.blocks)
    for block_id, n in counts.items():
        if not block_id:
            issues.append(issue(IssueCode.EMPTY_ID, "Bloc sans id", field="id"))
        elif n > 1:
            issues.append(issue(
                IssueCode.DUPLICATE_ID,
                f"Id {block_id!r} utilisé par {n} blocs",
                block_id=block_id, field="id",
            ))

    # ── header ──
    headers = [b for b in doc.blocks if b.type == HEADER_TYPE]
    if not headers:
        issues.append(issue(IssueCode.MISSING_HEADER, "Le layout doit contenir un bloc header"))
    elif len(headers) > 1:
        for extra in headers[1:]:
            issues.append(issue(
                IssueCode.DUPLICATE_HEADER,
                "Un seul bloc header est autorisé",
                block_id=extra.id, field="type",
            ))
    if headers and doc.blocks[0].type != HEADER_TYPE:
        issues.append(issue(
            IssueCode.HEADER_NOT_FIRST,
            "Le header doit rester en première position",
            block_id=headers[0].id,
        ))

    # ── types / variants ──
    for b in doc.blocks:
        descriptor = find_type(b.type)
        if descriptor is None:
            issues.append(issue(
                IssueCode.UNKNOWN_TYPE,
                f"Type de bloc inconnu : {b.type!r}",
                block_id=b.id, field="type",
            ))
        elif b.variant is not None and descriptor.get_variant(b.variant) is None:
            issues.append(issue(
                IssueCode.UNKNOWN_VARIANT,
                f"Variant {b.variant!r} non disponible pour {b.type!r} "
                f"(disponibles : {', '.join(descriptor.variant_ids)})",
                block_id=b.id, field="variant",
            ))

    issues.extend(validate_theme(doc.theme))
    return issues
