"""
Tests routes /api/layouts — store en mémoire injecté via dependency_overrides
"""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from fastapi.testclient import TestClient

from profile_layout.store import InMemoryLayoutStore


# ── Fixtures ──────────────────────────────────────────────────────────────

@pytest.fixture
def store():
    return InMemoryLayoutStore()


@pytest.fixture
def client(store):
    """Client de test, store mémoire partagé entre les requêtes."""
    from profile_layout.api.main import app
    from profile_layout.api.routes.layouts import get_store

    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ── Catalogue / thèmes ────────────────────────────────────────────────────

class TestCatalogue:
    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"

    def test_catalog(self, client):
        r = client.get("/api/layouts/catalog")
        assert r.status_code == 200
        blocks = {b["type"]: b for b in r.json()["blocks"]}
        assert blocks["games"]["default_variant"] == "coverLarge"
        assert [v["id"] for v in blocks["about"]["variants"]] == ["richText", "qa"]

    def test_themes(self, client):
        data = client.get("/api/layouts/themes").json()
        assert data["default"] == "neonBlue"
        green = next(t for t in data["themes"] if t["id"] == "neonGreen")
        assert green["colors"]["accent"] == "#39ff14"
        assert green["colors"]["bgGradient"] == ["#0c0c0c", "#1a1a1a"]


# ── Layout d'un profil ────────────────────────────────────────────────────

class TestLayout:
    def test_get_cree_le_defaut(self, client, store):
        r = client.get("/api/layouts/user-1")
        assert r.status_code == 200
        data = r.json()
        assert data["profile_id"] == "user-1"
        assert [b["id"] for b in data["blocks"]] == ["header", "friends", "games", "achievements", "accounts"]
        assert len(store.save_calls) == 1

        client.get("/api/layouts/user-1")
        assert len(store.save_calls) == 1

    def test_put(self, client, store):
        r = client.put("/api/layouts/user-1", json={
            "blocks": [
                {"id": "header", "type": "header"},
                {"id": "g", "type": "gallery", "variant": "carousel"},
            ],
            "theme": {"name": "custom", "colors": {"accent": "#ff0000"}},
        })
        assert r.status_code == 200
        assert [b["id"] for b in r.json()["blocks"]] == ["header", "g"]
        assert store.get("user-1").theme.colors.accent == "#ff0000"

    def test_put_invalide(self, client, store):
        r = client.put("/api/layouts/user-1", json={
            "blocks": [{"id": "g", "type": "gallery"}],
        })
        assert r.status_code == 422
        codes = [e["code"] for e in r.json()["detail"]["errors"]]
        assert "MISSING_HEADER" in codes
        assert store.get("user-1").block_ids()[0] == "header"

    def test_put_couleur_invalide(self, client):
        r = client.put("/api/layouts/user-1", json={
            "blocks": [{"id": "header", "type": "header"}],
            "theme": {"colors": {"accent": "red"}},
        })
        assert r.status_code == 422
        error = r.json()["detail"]["errors"][0]
        assert error["code"] == "INVALID_COLOR"
        assert error["field"] == "theme.colors.accent"

    def test_put_changement_de_type(self, client, store):
        client.get("/api/layouts/user-1")
        r = client.put("/api/layouts/user-1", json={
            "blocks": [
                {"id": "header", "type": "header"},
                {"id": "friends", "type": "games", "variant": "carousel"},
            ],
        })
        assert r.status_code == 422
        error = r.json()["detail"]["errors"][0]
        assert error["code"] == "TYPE_CHANGED"
        assert error["block_id"] == "friends"
        assert store.get("user-1").get_block("friends").type == "friends"

    def test_store_indisponible(self, client, store):
        store.fail_next_load()
        r = client.get("/api/layouts/user-1")
        assert r.status_code == 503

    def test_put_store_indisponible(self, client, store):
        client.get("/api/layouts/user-1")
        store.fail_next_save()
        r = client.put("/api/layouts/user-1", json={"blocks": [{"id": "header", "type": "header"}]})
        assert r.status_code == 503
        assert len(store.get("user-1").blocks) == 5

    def test_render(self, client):
        client.put("/api/layouts/user-1", json={
            "blocks": [{"id": "header", "type": "header"}, {"id": "s", "type": "stream"}],
            "theme": {"name": "iceBlue", "colors": {"accent": "#00bfff"}},
        })
        data = client.get("/api/layouts/user-1/render").json()
        assert data["profile_id"] == "user-1"
        assert data["blocks"][1] == {"id": "s", "type": "stream", "variant": "player", "config": {}, "known": True}
        assert data["tokens"]["accent"] == "#00bfff"
        assert data["css_variables"]["--color-accent-rgb"] == "0, 191, 255"
