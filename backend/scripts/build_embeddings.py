"""
Rattrapage et réindexation des embeddings (vidéos, documents, quiz, modules).

Les contenus importés hors de l'assistant (upload, import en masse) n'ont pas toujours de vecteur;
ils restent alors invisibles pour la recherche sémantique. Il en va de même après un changement de
modèle: les vecteurs d'un autre modèle sont ignorés par la recherche. Ce script calcule les
vecteurs manquants ou périmés par lots avec l'embedder configuré et les enregistre avec le nom du
modèle.

Usage:
    python -m backend.scripts.build_embeddings [--tenant T] [--dry-run] [--batch-size N]

Environment:
- DATABASE_URL: base cible
- EMBEDDINGS_PROVIDER/OPENAI_API_KEY: embedder résolu via le conteneur
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import structlog

# Permet l'exécution du script en direct (python backend/scripts/build_embeddings.py)
ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from backend.core.container import Container, container  # noqa: E402
from backend.core.logging import setup_logging  # noqa: E402
from backend.domain.entities import CONTENT_TYPES  # noqa: E402
from backend.infra.repo.content_repo import ContentRepository  # noqa: E402

log = structlog.get_logger(__name__)

DEFAULT_BATCH_SIZE = 64


def backfill(
    deps: Container,
    tenant_id: str | None = None,
    dry_run: bool = False,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> dict[str, int]:
    """Calcule et enregistre les embeddings manquants ou produits par un autre modèle.

    Args:
        deps: Conteneur fournissant moteur SQL et embedder.
        tenant_id: Limite le rattrapage à un tenant (tous si None).
        dry_run: Compte les lignes sans appeler l'embedder ni écrire.
        batch_size: Nombre de textes par appel au fournisseur.

    Returns:
        dict: nombre de lignes traitées (ou à traiter) par type de contenu.
    """
    repository = ContentRepository(deps.engine)
    embedder = deps.embedder
    model_name = getattr(embedder, "model_name", None) or deps.settings.embedding_model_name
    counts: dict[str, int] = {}
    for content_type in CONTENT_TYPES:
        pending = repository.missing_embeddings(content_type, tenant_id, model_name)
        counts[content_type] = len(pending)
        if dry_run or not pending:
            log.info("backfill_pending", content_type=content_type, count=len(pending))
            continue
        for start in range(0, len(pending), batch_size):
            batch = pending[start : start + batch_size]
            vectors = embedder.embed([text for _, text in batch])
            for (entity_id, _), vector in zip(batch, vectors, strict=True):
                repository.set_embedding(content_type, entity_id, vector, model_name)
        log.info("backfill_done", content_type=content_type, count=len(pending), model=model_name)
    return counts


def main(argv: list[str] | None = None) -> int:
    """Point d'entrée CLI."""
    parser = argparse.ArgumentParser(description="Rattrapage des embeddings manquants")
    parser.add_argument("--tenant", type=str, default=None, help="Tenant à traiter (défaut: tous)")
    parser.add_argument(
        "--dry-run", action="store_true", help="Compte les lignes sans calculer de vecteurs"
    )
    parser.add_argument(
        "--batch-size", type=int, default=DEFAULT_BATCH_SIZE, help="Taille des lots d'embeddings"
    )
    args = parser.parse_args(argv)

    setup_logging()
    counts = backfill(container, args.tenant, dry_run=args.dry_run, batch_size=args.batch_size)
    total = sum(counts.values())
    verb = "à traiter" if args.dry_run else "traitées"
    print(f"Embeddings: {total} lignes {verb} {counts}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
