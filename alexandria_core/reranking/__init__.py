"""
Optional semantic re-rank.

Usage:
    from alexandria_core.reranking import rerank_documents

    ranked = rerank_documents(records, query, "safe", provider=my_provider)
"""

from .base import BaseEmbeddingProvider
from .semantic import cosine_similarity, rerank_documents

__all__ = [
    'BaseEmbeddingProvider',
    'cosine_similarity',
    'rerank_documents',
]
