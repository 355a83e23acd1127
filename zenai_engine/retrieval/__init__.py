"""
Retrieval module.

- DocumentStore: similarity search contract used by the context builder.
- ChromaDocumentStore: ChromaDB + llama-index embedding implementation.
- relevance_band: similarity score -> RelevanceBand.
"""

from zenai_engine.retrieval.document_store import (
    ChromaDocumentStore,
    DocumentInput,
    DocumentStore,
    RetrievedDocument,
    build_where,
    relevance_band,
)

__all__ = [
    "ChromaDocumentStore",
    "DocumentInput",
    "DocumentStore",
    "RetrievedDocument",
    "build_where",
    "relevance_band",
]
