"""
Registry des types de blocs — catalogue statique (types, variants, défauts).

Ajouter un type ou un variant = éditer BLOCK_DEFINITIONS puis redéployer.
Rien ici n'est modifiable à l'exécution.

Un type inconnu rencontré dans des données persistées ne fait jamais planter
le moteur : find_type() renvoie None et le renderer bascule sur son bloc
générique, l'utilisateur peut toujours supprimer le bloc.
"""
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..errors import RegistryLookupError

HEADER_TYPE = "header"


class VariantDescriptor(BaseModel):
    """Mode de présentation d'un type de bloc."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""


class TypeDescriptor(BaseModel):
    """Entrée du registry : un type de bloc et ses variants (ordonnés)."""
    model_config = ConfigDict(frozen=True)

    type: str
    name: str
    description: str = ""
    icon: str = ""
    variants: List[VariantDescriptor] = Field(default_factory=list)
    default_variant: str

    @property
    def variant_ids(self) -> List[str]:
        return [v.id for v in self.variants]

    def get_variant(self, variant_id: str) -> Optional[VariantDescriptor]:
        for v in self.variants:
            if v.id == variant_id:
                return v
        return None


def _variant(id: str, name: str, description: str) -> VariantDescriptor:
    return VariantDescriptor(id=id, name=name, description=description)


BLOCK_DEFINITIONS: List[TypeDescriptor] = [
    TypeDescriptor(
        type=HEADER_TYPE,
        name="Profile Header",
        description="Avatar, banner, name, and bio",
        icon="👤",
        variants=[
            _variant("default", "Standard", "Classic header with banner overlay"),
        ],
        default_variant="default",
    ),
    TypeDescriptor(
        type="friends",
        name="Friends",
        description="Display friends list",
        icon="👥",
        variants=[
            _variant("compactList",     "Compact List",     "Simple list with names and avatars"),
            _variant("avatarGrid",      "Avatar Grid",      "Grid of friend avatars"),
            _variant("featuredFriends", "Featured Friends", "Highlight top friends with stats"),
        ],
        default_variant="avatarGrid",
    ),
    TypeDescriptor(
        type="games",
        name="Games I Play",
        description="Showcase your game collection",
        icon="🎮",
        variants=[
            _variant("coverSmall", "Small Grid",        "Compact grid of game covers"),
            _variant("coverLarge", "Large Grid",        "Detailed grid with large covers"),
            _variant("carousel",   "Horizontal Scroll", "Scrollable carousel of games"),
            _variant("showcase",   "Showcase",          "Featured games with descriptions"),
        ],
        default_variant="coverLarge",
    ),
    TypeDescriptor(
        type="achievements",
        name="Achievements",
        description="Gaming achievements and trophies",
        icon="🏆",
        variants=[
            _variant("grid",     "Achievement Grid", "Grid of achievement badges"),
            _variant("featured", "Featured",         "Highlight recent achievements"),
            _variant("stats",    "Stats Overview",   "Achievement statistics"),
        ],
        default_variant="grid",
    ),
    TypeDescriptor(
        type="accounts",
        name="Connected Accounts",
        description="Social media and gaming platforms",
        icon="🔗",
        variants=[
            _variant("grid",  "Icon Grid",      "Grid of platform icons"),
            _variant("list",  "Detailed List",  "List with platform names"),
            _variant("cards", "Platform Cards", "Card-based layout with stats"),
        ],
        default_variant="grid",
    ),
    TypeDescriptor(
        type="about",
        name="About Me",
        description="Personal bio and background information",
        icon="📝",
        variants=[
            _variant("richText", "Rich Text", "Markdown-formatted paragraph with rich text support"),
            _variant("qa",       "Q&A Cards", "Question and answer format with card layout"),
        ],
        default_variant="richText",
    ),
    TypeDescriptor(
        type="stream",
        name="Latest Stream",
        description="Twitch/YouTube stream integration",
        icon="🎥",
        variants=[
            _variant("player",    "Large Player", "Full-size embedded stream player with title and channel link"),
            _variant("thumbnail", "Thumbnail",    "Compact view with thumbnail and watch button"),
        ],
        default_variant="player",
    ),
    TypeDescriptor(
        type="roster",
        name="Team Roster",
        description="E-sports team members and roles",
        icon="⚔️",
        variants=[
            _variant("grid", "Avatar Grid",   "5-player avatar grid with roles and hover effects"),
            _variant("list", "Detailed List", "Scrollable list with join dates and social links"),
        ],
        default_variant="grid",
    ),
    TypeDescriptor(
        type="gallery",
        name="Media Gallery",
        description="Photos and screenshots showcase",
        icon="🖼️",
        variants=[
            _variant("masonry",  "Masonry Grid",     "Columns-based masonry layout with lightbox"),
            _variant("carousel", "3-Image Carousel", "Carousel with navigation and pagination"),
        ],
        default_variant="masonry",
    ),
    TypeDescriptor(
        type="music-tracks",
        name="Favorite Songs",
        description="Favorite tracks and music taste",
        icon="🎵",
        variants=[
            _variant("grid", "Album Grid", "5×2 grid of album artwork with hover details"),
            _variant("list", "Track List", "Vertical list with track details and play buttons"),
        ],
        default_variant="grid",
    ),
    TypeDescriptor(
        type="custom",
        name="Custom Block",
        description="Free-form content block",
        icon="✨",
        variants=[
            _variant("default", "Standard", "Free-form card"),
        ],
        default_variant="default",
    ),
]

# Lookup O(1) par type
_REGISTRY: Dict[str, TypeDescriptor] = {d.type: d for d in BLOCK_DEFINITIONS}

# Anciens noms encore présents dans des layouts persistés
LEGACY_TYPE_ALIASES: Dict[str, str] = {
    "spotify-tracks": "music-tracks",
}


def normalize_type(block_type: str) -> str:
    """Renvoie le nom courant d'un type (résout les alias historiques)."""
    return LEGACY_TYPE_ALIASES.get(block_type, block_type)


def list_types() -> List[TypeDescriptor]:
    """Tous les types enregistrés, dans l'ordre du catalogue."""
    return list(BLOCK_DEFINITIONS)


def find_type(block_type: str) -> Optional[TypeDescriptor]:
    """Lookup non bloquant : None si le type est inconnu."""
    return _REGISTRY.get(normalize_type(block_type))


def get_type(block_type: str) -> TypeDescriptor:
    """
    Lookup strict.

    Raises:
        RegistryLookupError: si le type n'existe pas (donnée persistée obsolète
            ou erreur de programmation côté appelant).
    """
    descriptor = find_type(block_type)
    if descriptor is None:
        raise RegistryLookupError(block_type)
    return descriptor


def is_valid_variant(block_type: str, variant: str) -> bool:
    descriptor = find_type(block_type)
    return descriptor is not None and descriptor.get_variant(variant) is not None


def default_variant(block_type: str) -> str:
    return get_type(block_type).default_variant
