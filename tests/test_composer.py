"""
Tests du Layout Composer — session d'édition (load / mutations / commit)
Store : InMemoryLayoutStore (pannes simulées via fail_next_*)
"""
import sys, os, asyncio
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from profile_layout.composer import ComposerState, LayoutComposer, can_transition
from profile_layout.core import Block, IssueCode, LayoutDocument, default_layout
from profile_layout.errors import CommitRejected, ComposerStateError, StoreError
from profile_layout.store import InMemoryLayoutStore


# ── Helpers ───────────────────────────────────────────────────────────────

async def loaded(store=None, owner="user-1"):
    store = store or InMemoryLayoutStore()
    composer = LayoutComposer(store, owner)
    await composer.load()
    return composer, store


class SlowStore(InMemoryLayoutStore):
    """Save bloqué tant que `release` n'est pas posé."""

    def __init__(self, *a, **kw):
        super().__init__(*a, **kw)
        self.release = asyncio.Event()

    async def save(self, doc):
        if self.save_calls:
            await self.release.wait()
        return await super().save(doc)


# ── États ─────────────────────────────────────────────────────────────────

class TestTransitions:
    def test_table(self):
        assert can_transition("UNINITIALIZED", "LOADING")
        assert can_transition("READY", "SAVING")
        assert can_transition("ERROR", "LOADING")
        assert not can_transition("UNINITIALIZED", "READY")
        assert not can_transition("SAVING", "SAVING")

    def test_document_avant_load(self):
        composer = LayoutComposer(InMemoryLayoutStore(), "user-1")
        assert composer.state is ComposerState.UNINITIALIZED
        with pytest.raises(ComposerStateError):
            composer.document
        with pytest.raises(ComposerStateError):
            composer.add_block("gallery")

    @pytest.mark.asyncio
    async def test_commit_avant_load(self):
        composer = LayoutComposer(InMemoryLayoutStore(), "user-1")
        with pytest.raises(ComposerStateError):
            await composer.commit()

    @pytest.mark.asyncio
    async def test_double_load_interdit(self):
        composer, _ = await loaded()
        with pytest.raises(ComposerStateError):
            await composer.load()


# ── Chargement ────────────────────────────────────────────────────────────

class TestLoad:
    @pytest.mark.asyncio
    async def test_layout_par_defaut_sauvegarde_une_fois(self):
        composer, store = await loaded()
        assert composer.state is ComposerState.READY
        assert composer.document.block_ids() == ["header", "friends", "games", "achievements", "accounts"]
        assert len(store.save_calls) == 1
        assert store.get("user-1") is not None
        assert composer.updated_at is not None
        assert not composer.is_dirty

    @pytest.mark.asyncio
    async def test_layout_existant(self):
        doc = LayoutDocument(owner_id="user-1", blocks=[Block(id="header", type="header")])
        composer, store = await loaded(InMemoryLayoutStore({"user-1": doc}))
        assert composer.document.block_ids() == ["header"]
        assert store.save_calls == []

    @pytest.mark.asyncio
    async def test_hydratation(self):
        doc = LayoutDocument(owner_id="user-1", blocks=[
            Block(id="header", type="header"),
            Block(id="g", type="games", variant="hologram"),
            Block(id="m", type="spotify-tracks", variant="list"),
        ])
        composer, _ = await loaded(InMemoryLayoutStore({"user-1": doc}))
        assert composer.document.get_block("g").variant == "coverLarge"
        assert composer.document.get_block("m").type == "music-tracks"

    @pytest.mark.asyncio
    async def test_echec_puis_retry(self):
        store = InMemoryLayoutStore()
        store.fail_next_load()
        composer = LayoutComposer(store, "user-1")
        with pytest.raises(StoreError):
            await composer.load()
        assert composer.state is ComposerState.ERROR
        assert isinstance(composer.last_error, StoreError)

        await composer.load()
        assert composer.state is ComposerState.READY
        assert composer.last_error is None

    @pytest.mark.asyncio
    async def test_echec_sauvegarde_du_defaut(self):
        store = InMemoryLayoutStore()
        store.fail_next_save()
        composer = LayoutComposer(store, "user-1")
        with pytest.raises(StoreError):
            await composer.load()
        assert composer.state is ComposerState.ERROR
        assert store.get("user-1") is None


# ── Mutations ─────────────────────────────────────────────────────────────

class TestMutations:
    @pytest.mark.asyncio
    async def test_mutations_dans_l_ordre(self):
        composer, _ = await loaded()
        r = composer.add_block("gallery")
        gallery_id = r.document.blocks[-1].id
        composer.move_block(gallery_id, 1)
        composer.remove_block("achievements")
        composer.set_variant("games", "carousel")
        composer.set_config("friends", {"limit": 6})
        assert composer.document.block_ids() == ["header", gallery_id, "friends", "games", "accounts"]
        assert composer.document.get_block("games").variant == "carousel"
        assert composer.is_dirty

    @pytest.mark.asyncio
    async def test_mutation_refusee(self):
        composer, _ = await loaded()
        before = composer.document
        r = composer.remove_block("header")
        assert not r.ok
        assert composer.document is before
        assert [i.code for i in composer.last_issues] == [IssueCode.HEADER_PINNED]

    @pytest.mark.asyncio
    async def test_theme(self):
        composer, _ = await loaded()
        assert composer.set_theme({"name": "custom", "colors": {"accent": "#ff0000"}}).ok
        assert composer.document.theme.colors.accent == "#ff0000"

    @pytest.mark.asyncio
    async def test_reset_to_default(self):
        composer, _ = await loaded()
        composer.remove_block("games")
        composer.set_theme({"name": "custom", "colors": {"accent": "#ff0000"}})
        composer.reset_to_default()
        assert composer.document.content_equals(default_layout("user-1"))
        assert not composer.is_dirty

    @pytest.mark.asyncio
    async def test_replace_content(self):
        composer, _ = await loaded()
        r = composer.replace_content([{"id": "header", "type": "header"}, {"id": "s", "type": "stream"}])
        assert r.ok
        assert composer.document.block_ids() == ["header", "s"]


# ── Commit ────────────────────────────────────────────────────────────────

class TestCommit:
    @pytest.mark.asyncio
    async def test_commit(self):
        composer, store = await loaded()
        composer.add_block("gallery")
        receipt = await composer.commit()
        assert receipt.owner_id == "user-1"
        assert store.get("user-1").content_equals(composer.document)
        assert composer.committed.updated_at == receipt.updated_at
        assert not composer.is_dirty
        assert composer.state is ComposerState.READY

    @pytest.mark.asyncio
    async def test_echec_store_conserve_les_edits(self):
        composer, store = await loaded()
        composer.add_block("gallery")
        composer.set_variant("games", "showcase")
        composer.remove_block("accounts")
        edited = composer.document

        store.fail_next_save()
        with pytest.raises(StoreError):
            await composer.commit()
        assert composer.state is ComposerState.READY
        assert composer.document is edited
        assert composer.is_dirty
        assert isinstance(composer.last_error, StoreError)

        await composer.commit()
        persisted = store.get("user-1")
        assert persisted.content_equals(edited)
        assert persisted.get_block("games").variant == "showcase"
        assert "accounts" not in persisted.block_ids()
        assert not composer.is_dirty

    @pytest.mark.asyncio
    async def test_document_invalide_rejete(self):
        doc = LayoutDocument(owner_id="user-1", blocks=[
            Block(id="header", type="header"), Block(id="x", type="twitter"),
        ])
        composer, store = await loaded(InMemoryLayoutStore({"user-1": doc}))
        with pytest.raises(CommitRejected) as exc:
            await composer.commit()
        assert [i.code for i in exc.value.issues] == [IssueCode.UNKNOWN_TYPE]
        assert store.save_calls == []
        assert composer.state is ComposerState.READY

        composer.remove_block("x")
        await composer.commit()
        assert store.get("user-1").block_ids() == ["header"]

    @pytest.mark.asyncio
    async def test_mutation_pendant_le_commit(self):
        store = SlowStore()
        composer, _ = await loaded(store)
        composer.add_block("gallery")

        task = asyncio.create_task(composer.commit())
        await asyncio.sleep(0)
        assert composer.state is ComposerState.SAVING
        with pytest.raises(ComposerStateError):
            await composer.commit()

        composer.add_block("stream")
        store.release.set()
        await task

        assert composer.state is ComposerState.READY
        assert [b.type for b in store.get("user-1").blocks][-1] == "gallery"
        assert composer.document.blocks[-1].type == "stream"
        assert composer.is_dirty

        await composer.commit()
        assert store.get("user-1").blocks[-1].type == "stream"
