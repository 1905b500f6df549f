"""
Exceptions du moteur de composition.

Les ValidationIssue (core/validation.py) ne sont jamais levées : ce sont des
résultats attendus d'une édition. Seules les erreurs d'état, de store et de
registry passent par des exceptions.
"""
from typing import Iterable, Optional


class ProfileLayoutError(Exception):
    """Erreur de base du package."""


class RegistryLookupError(ProfileLayoutError, KeyError):
    """Type de bloc absent du registry."""

    def __init__(self, block_type: str):
        self.block_type = block_type
        super().__init__(f"Type de bloc inconnu : {block_type!r}")

    def __str__(self) -> str:
        # KeyError.__str__ entoure le message de quotes
        return self.args[0]


class StoreError(ProfileLayoutError):
    """Échec du Layout Store (load ou save) — récupérable par retry."""

    def __init__(self, message: str, owner_id: Optional[str] = None):
        self.owner_id = owner_id
        super().__init__(message)


class ComposerStateError(ProfileLayoutError):
    """Opération appelée dans un état du Composer qui ne l'autorise pas."""


class CommitRejected(ProfileLayoutError):
    """Le document de travail ne passe pas validate() au moment du commit."""

    def __init__(self, issues: Iterable):
        self.issues = list(issues)
        detail = "; ".join(i.message for i in self.issues)
        super().__init__(f"Commit refusé : {detail}")
