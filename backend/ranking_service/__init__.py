"""
Ranking Service Package
"""

from .documents import Document, DocumentSet
from .link_graph import LinkGraph
from .weights import DerivedWeights, derive_weights
from .collection import CollectionError, load_collection, rank_documents, format_ranking
from .pagerank import (
    InvalidParametersError,
    IterationState,
    RankingResult,
    RankIterator,
    compute_pagerank,
    run_pagerank_job
)

__all__ = [
    "Document",
    "DocumentSet",
    "LinkGraph",
    "DerivedWeights",
    "derive_weights",
    "CollectionError",
    "load_collection",
    "rank_documents",
    "format_ranking",
    "InvalidParametersError",
    "IterationState",
    "RankingResult",
    "RankIterator",
    "compute_pagerank",
    "run_pagerank_job"
]
