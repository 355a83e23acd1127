"""
Document / vector store.

This module defines:
- RetrievedDocument: one similarity-search hit {content, metadata, score}.
- DocumentStore: the abstract contract consumed by the context builder
  (similarity_search, add_documents, delete).
- ChromaDocumentStore: ChromaDB collection + llama-index embeddings.

Score convention: ChromaDB returns cosine *distances* (lower = more similar).
Every score that leaves this module is a *similarity*, 1 - distance, so
higher is better; relevance_band() is defined on that scale.
"""

from __future__ import annotations

import asyncio
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import chromadb
from chromadb.config import Settings
from llama_index.core.base.embeddings.base import BaseEmbedding
from llama_index.embeddings.openai import OpenAIEmbedding

from zenai_engine.config.constants import METADATA_KEYS, RELEVANCE_THRESHOLDS, RelevanceBand
from zenai_engine.config.settings import config
from zenai_engine.utils.exceptions import RetrievalError
from zenai_engine.utils.helpers import split_into_token_chunks
from zenai_engine.utils.logger import logger


def relevance_band(score: float) -> RelevanceBand:
    """
    Map a similarity score to a relevance band.

    >= 0.9 very_high, >= 0.8 high, >= 0.7 medium, >= 0.6 low, else minimal.
    """
    for threshold, band in RELEVANCE_THRESHOLDS:
        if score >= threshold:
            return band
    return RelevanceBand.MINIMAL


@dataclass(frozen=True)
class RetrievedDocument:
    """A similarity-search hit. score is a similarity (higher = more similar)."""

    content: str
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False)
    score: float = 0.0
    id: Optional[str] = None

    @property
    def relevance(self) -> RelevanceBand:
        return relevance_band(self.score)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "content": self.content,
            "metadata": dict(self.metadata),
            "score": self.score,
            "relevance": self.relevance.value,
        }


@dataclass
class DocumentInput:
    """A document to index."""

    content: str
    metadata: Dict[str, Any] = field(default_factory=dict)
    id: Optional[str] = None


class DocumentStore(ABC):
    """Contract for similarity search over indexed documents."""

    async def initialize(self) -> None:
        """Connect / create collections; awaited once at startup."""

    @abstractmethod
    async def similarity_search(
        self,
        query: str,
        k: int = 3,
        filter: Optional[Mapping[str, Any]] = None,
    ) -> List[RetrievedDocument]:
        """Return up to k documents, most similar first."""

    @abstractmethod
    async def add_documents(self, items: Sequence[DocumentInput]) -> List[str]:
        """Index items and return the ids of the stored entries."""

    @abstractmethod
    async def delete(self, filter: Mapping[str, Any]) -> None:
        """Delete every entry whose metadata matches filter."""


def _sanitize_metadata(metadata: Mapping[str, Any]) -> Dict[str, Any]:
    """ChromaDB metadata values must be str, int, float or bool."""
    sanitized: Dict[str, Any] = {}
    for key, value in metadata.items():
        if value is None:
            continue
        if isinstance(value, (str, int, float, bool)):
            sanitized[key] = value
        else:
            sanitized[key] = str(value)
    return sanitized


def build_where(filter: Optional[Mapping[str, Any]]) -> Optional[Dict[str, Any]]:
    """Translate a flat equality filter into a ChromaDB where clause."""
    if not filter:
        return None
    clauses = [{key: value} for key, value in filter.items()]
    if len(clauses) == 1:
        return clauses[0]
    return {"$and": clauses}


class ChromaDocumentStore(DocumentStore):
    """
    Document store backed by a ChromaDB collection (cosine space).

    ChromaDB calls are synchronous and run in worker threads; embeddings are
    computed with the llama-index embedding model's async API. Long documents
    are split into token chunks before indexing.
    """

    def __init__(
        self,
        collection_name: Optional[str] = None,
        client: Optional[Any] = None,
        persist_directory: Optional[Path] = None,
        embedding: Optional[BaseEmbedding] = None,
        chunk_tokens: Optional[int] = None,
        score_threshold: Optional[float] = None,
    ) -> None:
        self.collection_name = collection_name or config.DOCUMENT_COLLECTION_NAME
        self.persist_directory = Path(persist_directory or config.CHROMA_PERSIST_DIR)
        self.chunk_tokens = chunk_tokens or config.DOCUMENT_CHUNK_TOKENS
        self.score_threshold = score_threshold
        self.logger = logger

        self._client = client
        self._embedding = embedding
        self.collection = None

    async def initialize(self) -> None:
        try:
            if self._client is None:
                self.persist_directory.mkdir(parents=True, exist_ok=True)
                self._client = chromadb.PersistentClient(
                    path=str(self.persist_directory),
                    settings=Settings(anonymized_telemetry=False),
                )
            if self._embedding is None:
                self._embedding = OpenAIEmbedding(
                    model_name=config.EMBEDDING_MODEL,
                    api_key=config.OPENAI_API_KEY,
                )
            self.collection = await asyncio.to_thread(
                self._client.get_or_create_collection,
                name=self.collection_name,
                metadata={"hnsw:space": "cosine"},
            )
        except Exception as e:
            error_msg = f"Error initializing document store '{self.collection_name}': {e}"
            self.logger.error(error_msg)
            raise RetrievalError(error_msg) from e
        self.logger.info(f"[ChromaDocumentStore] Collection '{self.collection_name}' ready")

    @property
    def is_ready(self) -> bool:
        return self.collection is not None

    def _require_collection(self):
        if self.collection is None:
            raise RetrievalError("Document store is not initialized; await initialize() first")
        return self.collection

    # ------------------------------------------------------------------
    # DocumentStore implementation
    # ------------------------------------------------------------------
    async def similarity_search(
        self,
        query: str,
        k: int = 3,
        filter: Optional[Mapping[str, Any]] = None,
    ) -> List[RetrievedDocument]:
        collection = self._require_collection()
        if not query or not query.strip():
            raise RetrievalError("Similarity search requires a non-empty query")
        if k <= 0:
            return []

        try:
            query_embedding = await self._embedding.aget_query_embedding(query)
            results = await asyncio.to_thread(
                collection.query,
                query_embeddings=[query_embedding],
                n_results=k,
                where=build_where(filter),
                include=["documents", "metadatas", "distances"],
            )
        except Exception as e:
            error_msg = f"Similarity search failed: {e}"
            self.logger.error(f"[ChromaDocumentStore] {error_msg}")
            raise RetrievalError(error_msg) from e

        documents: List[RetrievedDocument] = []
        ids = results.get("ids", [[]])[0]
        for i, doc_id in enumerate(ids):
            score = 1.0 - results["distances"][0][i]
            if self.score_threshold is not None and score < self.score_threshold:
                continue
            documents.append(
                RetrievedDocument(
                    id=doc_id,
                    content=results["documents"][0][i] or "",
                    metadata=dict(results["metadatas"][0][i] or {}),
                    score=score,
                )
            )

        self.logger.debug(
            f"[ChromaDocumentStore] {len(documents)} result(s) for query (k={k}, filter={filter})"
        )
        return documents

    async def add_documents(self, items: Sequence[DocumentInput]) -> List[str]:
        collection = self._require_collection()
        ids: List[str] = []
        texts: List[str] = []
        metadatas: List[Dict[str, Any]] = []

        for item in items:
            document_id = item.id or uuid.uuid4().hex
            chunks = split_into_token_chunks(item.content, self.chunk_tokens)
            for index, chunk in enumerate(chunks):
                ids.append(document_id if len(chunks) == 1 else f"{document_id}-{index}")
                texts.append(chunk)
                metadata = _sanitize_metadata(item.metadata)
                metadata["document_id"] = document_id
                metadata[METADATA_KEYS["chunk_index"]] = index
                metadatas.append(metadata)

        if not ids:
            return []

        try:
            embeddings = await self._embedding.aget_text_embedding_batch(texts)
            await asyncio.to_thread(
                collection.add,
                ids=ids,
                documents=texts,
                embeddings=embeddings,
                metadatas=metadatas,
            )
        except Exception as e:
            error_msg = f"Failed to add {len(ids)} document chunk(s): {e}"
            self.logger.error(f"[ChromaDocumentStore] {error_msg}")
            raise RetrievalError(error_msg) from e

        self.logger.info(f"[ChromaDocumentStore] Indexed {len(ids)} chunk(s) from {len(items)} document(s)")
        return ids

    async def delete(self, filter: Mapping[str, Any]) -> None:
        collection = self._require_collection()
        where = build_where(filter)
        if where is None:
            raise RetrievalError("Refusing to delete without a metadata filter")
        try:
            await asyncio.to_thread(collection.delete, where=where)
        except Exception as e:
            raise RetrievalError(f"Failed to delete documents matching {dict(filter)}: {e}") from e
        self.logger.info(f"[ChromaDocumentStore] Deleted documents matching {dict(filter)}")

    async def count(self) -> int:
        return await asyncio.to_thread(self._require_collection().count)
