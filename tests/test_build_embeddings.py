"""
Tests du script de rattrapage des embeddings.

Ce module vérifie le mode `--dry-run`, le filtrage par tenant et le traitement par lots.
"""

from __future__ import annotations

from backend.scripts import build_embeddings
from backend.scripts.build_embeddings import backfill
from tests.fakes import OTHER_TENANT, TENANT


def test_backfill_dry_run_writes_nothing(deps, repository, seed, fake_embedder) -> None:
    """Teste que le dry-run compte sans appeler l'embedder."""
    seed("video", "Growth video", embed=False)
    seed("document", "Growth doc", embed=False)

    counts = backfill(deps, TENANT, dry_run=True)
    assert counts == {"video": 1, "document": 1, "quiz": 0, "module": 0}
    assert fake_embedder.call_count == 0
    assert len(repository.missing_embeddings("video", TENANT)) == 1


def test_backfill_scoped_to_tenant_in_batches(deps, repository, seed, fake_embedder) -> None:
    """Teste le rattrapage d'un tenant, par lots, avec le nom du modèle."""
    ids = [seed("document", f"Growth doc {i}", embed=False) for i in range(3)]
    seed("document", "Foreign growth", embed=False, tenant_id=OTHER_TENANT)

    counts = backfill(deps, TENANT, batch_size=2)

    assert counts["document"] == 3
    assert fake_embedder.call_count == 2
    assert repository.missing_embeddings("document", TENANT) == []
    assert len(repository.missing_embeddings("document", OTHER_TENANT)) == 1
    candidates = repository.embedded_candidates(TENANT, "document", fake_embedder.model_name)
    assert {c.id for c in candidates} == set(ids)


def test_main_dry_run_prints_counts(deps, seed, monkeypatch, capsys) -> None:
    seed("quiz", "Python quiz", embed=False)
    monkeypatch.setattr(build_embeddings, "container", deps)
    monkeypatch.setattr(build_embeddings, "setup_logging", lambda: None)

    assert build_embeddings.main(["--dry-run"]) == 0
    assert "1 lignes à traiter" in capsys.readouterr().out


def test_backfill_reindexes_rows_from_another_model(deps, repository, seed, fake_embedder) -> None:
    """Teste la réindexation des vecteurs produits par un ancien modèle."""
    stale = seed("video", "Marketing 101", embedding_model="text-embedding-ada-002")
    legacy = seed("video", "Marketing basics", embedding_model=None)
    current = seed("video", "Marketing advanced")

    counts = backfill(deps, TENANT)

    assert counts["video"] == 1
    assert repository.missing_embeddings("video", TENANT, fake_embedder.model_name) == []
    candidates = repository.embedded_candidates(TENANT, "video", fake_embedder.model_name)
    assert {c.id for c in candidates} == {stale, legacy, current}


def test_missing_embeddings_without_model_only_selects_unembedded(repository, seed) -> None:
    seed("document", "Finance doc", embedding_model="text-embedding-ada-002")
    unembedded = seed("document", "Finance notes", embed=False)

    assert [row_id for row_id, _ in repository.missing_embeddings("document", TENANT)] == [
        unembedded
    ]
    assert len(repository.missing_embeddings("document", TENANT, "fake-embedding")) == 2
