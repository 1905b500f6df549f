"""
Tests du Drag-Reorder Controller
Un geste = au plus UN appel composer.reorder ; hover/nudge/cancel ne touchent pas au Composer.
"""
import sys, os, asyncio
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from unittest.mock import MagicMock
import pytest

from profile_layout.composer import LayoutComposer
from profile_layout.core import default_layout
from profile_layout.drag import DragReorderController, DragState, can_transition
from profile_layout.store import InMemoryLayoutStore


# ── Fixtures ──────────────────────────────────────────────────────────────

@pytest.fixture
def composer():
    """Composer chargé sur le layout par défaut, reorder espionné."""
    c = LayoutComposer(InMemoryLayoutStore({"user-1": default_layout("user-1")}), "user-1")
    asyncio.run(c.load())
    c.reorder = MagicMock(wraps=c.reorder)
    return c


@pytest.fixture
def drag(composer):
    return DragReorderController(composer)


# ── Transitions ───────────────────────────────────────────────────────────

class TestTransitions:
    def test_table(self):
        assert can_transition("IDLE", "DRAGGING")
        assert can_transition("DRAGGING", "DROPPED")
        assert can_transition("CANCELLED", "IDLE")
        assert not can_transition("IDLE", "DROPPED")


# ── Début de geste ────────────────────────────────────────────────────────

class TestStart:
    def test_start(self, drag):
        assert drag.start("games")
        assert drag.state is DragState.DRAGGING
        assert drag.dragging_id == "games"
        assert drag.origin_index == 2

    def test_header_non_deplacable(self, drag):
        assert not drag.start("header")
        assert drag.state is DragState.IDLE

    def test_id_inconnu(self, drag):
        assert not drag.start("nope")

    def test_un_seul_drag(self, drag):
        assert drag.start("games")
        assert not drag.start("friends")
        assert drag.dragging_id == "games"


# ── Survol / clavier ──────────────────────────────────────────────────────

class TestHover:
    def test_hover_ne_mute_pas(self, drag, composer):
        before = composer.document
        drag.start("accounts")
        assert drag.hover(1) == 1
        assert drag.preview_order() == ["header", "accounts", "friends", "games", "achievements"]
        assert composer.document is before
        composer.reorder.assert_not_called()

    def test_hover_par_id(self, drag):
        drag.start("friends")
        assert drag.hover("achievements") == 3

    def test_hover_borne(self, drag):
        drag.start("friends")
        assert drag.hover(99) == 4
        assert drag.hover(-3) == 0

    def test_hover_hors_drag(self, drag):
        assert drag.hover(2) is None

    def test_nudge(self, drag):
        drag.start("games")
        assert drag.nudge(1) == 3
        assert drag.nudge(5) == 4
        assert drag.nudge(-10) == 0

    def test_preview_hors_drag(self, drag, composer):
        assert drag.preview_order() == composer.document.block_ids()


# ── Drop ──────────────────────────────────────────────────────────────────

class TestDrop:
    def test_drop_un_seul_reorder(self, drag, composer):
        drag.start("accounts")
        drag.hover(3)
        drag.hover(2)
        drag.nudge(-1)
        outcome = drag.drop()
        assert outcome.applied
        assert outcome.reason == "applied"
        composer.reorder.assert_called_once_with(["header", "accounts", "friends", "games", "achievements"])
        assert composer.document.block_ids() == ["header", "accounts", "friends", "games", "achievements"]
        assert drag.state is DragState.IDLE
        assert drag.dragging_id is None

    def test_drop_avec_cible(self, drag, composer):
        drag.start("friends")
        outcome = drag.drop("accounts")
        assert outcome.applied
        assert composer.document.block_ids() == ["header", "games", "achievements", "accounts", "friends"]

    def test_drop_sur_le_header_ignore(self, drag, composer):
        before = composer.document
        drag.start("games")
        outcome = drag.drop(0)
        assert not outcome.applied
        assert outcome.reason == "header_pinned"
        composer.reorder.assert_not_called()
        assert composer.document is before
        assert drag.state is DragState.IDLE

    def test_drop_a_la_meme_place(self, drag, composer):
        drag.start("games")
        outcome = drag.drop()
        assert outcome.reason == "unchanged"
        composer.reorder.assert_not_called()

    def test_bloc_supprime_pendant_le_drag(self, drag, composer):
        drag.start("games")
        drag.hover(4)
        composer.remove_block("games")
        outcome = drag.drop()
        assert outcome.reason == "stale"
        composer.reorder.assert_not_called()

    def test_drop_sans_drag(self, drag, composer):
        outcome = drag.drop(2)
        assert outcome.reason == "not_dragging"
        composer.reorder.assert_not_called()

    def test_cancel(self, drag, composer):
        before = composer.document
        drag.start("games")
        drag.hover(4)
        assert drag.cancel()
        assert drag.state is DragState.IDLE
        assert composer.document is before
        composer.reorder.assert_not_called()
        assert not drag.cancel()

    def test_nouveau_drag_apres_drop(self, drag, composer):
        drag.start("games")
        drag.drop(4)
        assert drag.start("friends")
        drag.drop(2)
        assert composer.reorder.call_count == 2
        assert composer.document.block_ids() == ["header", "achievements", "friends", "accounts", "games"]
