"""
Tests des embedders et de leur sélection.

L'embedder OpenAI est testé avec un client factice: aucun appel réseau.
"""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from backend.core.settings import Settings
from backend.infra.embeddings.factory import build_embedder
from backend.infra.embeddings.openai_embedder import OpenAIEmbedder

REDUCED_DIMENSIONS = 256


class FakeOpenAIClient:
    """Client minimal exposant `embeddings.create`, réponses dans le désordre."""

    def __init__(self) -> None:
        self.requests: list[dict] = []
        self.embeddings = SimpleNamespace(create=self._create)

    def _create(self, **kwargs):
        self.requests.append(kwargs)
        data = [
            SimpleNamespace(index=i, embedding=[float(i), float(len(t))])
            for i, t in enumerate(kwargs["input"])
        ]
        return SimpleNamespace(data=list(reversed(data)))


def test_openai_embedder_keeps_input_order() -> None:
    """Teste que les vecteurs sont renvoyés dans l'ordre des textes."""
    client = FakeOpenAIClient()
    embedder = OpenAIEmbedder(model="text-embedding-3-small", client=client)
    vectors = embedder.embed(["a", "bbb"])
    assert vectors == [[0.0, 1.0], [1.0, 3.0]]
    assert client.requests[0] == {"model": "text-embedding-3-small", "input": ["a", "bbb"]}
    assert embedder.embed_one("cc") == [0.0, 2.0]


def test_openai_embedder_passes_dimensions_and_skips_empty() -> None:
    client = FakeOpenAIClient()
    embedder = OpenAIEmbedder(client=client, dimensions=REDUCED_DIMENSIONS)
    assert embedder.embed([]) == []
    embedder.embed(["x"])
    assert len(client.requests) == 1
    assert client.requests[0]["dimensions"] == REDUCED_DIMENSIONS


def test_build_embedder_openai_and_unknown() -> None:
    """Teste la sélection du fournisseur et le rejet d'un fournisseur inconnu."""
    settings = Settings(_env_file=None, EMBEDDINGS_PROVIDER="openai", EMBEDDINGS_MODEL="m-1")
    embedder = build_embedder(settings, api_key="sk-test")
    assert isinstance(embedder, OpenAIEmbedder)
    assert embedder.model_name == "m-1"

    with pytest.raises(ValueError):
        build_embedder(Settings(_env_file=None, EMBEDDINGS_PROVIDER="cohere"))
