"""
Directed link graph over document ids

Built once from each document's outbound link tokens. Entry (a, b) is
non-zero when document a links to document b. Uses LIL format for
construction and CSR for arithmetic and degree scans.
"""

import logging
import numpy as np
from scipy.sparse import csr_matrix, lil_matrix
from typing import Dict, Iterator, Optional, Sequence, Tuple

from .documents import DocumentSet

logger = logging.getLogger(__name__)


class LinkGraph:
    """Fixed-size N x N directed weighted graph"""
    
    def __init__(self, n: int):
        if n < 0:
            raise ValueError(f"graph size must be non-negative, got {n}")
        
        self.n = n
        self._matrix = lil_matrix((n, n), dtype=np.float64)
        self._csr: Optional[csr_matrix] = None
    
    @classmethod
    def from_links(cls, documents: DocumentSet,
                   links: Dict[int, Sequence[str]]) -> "LinkGraph":
        """
        Build the graph from outbound link tokens
        
        Args:
            documents: Document set used to resolve names to ids
            links: Map of document id to the names it links to
            
        Returns:
            LinkGraph with one edge per resolved, non-self link
        """
        graph = cls(len(documents))
        skipped = 0
        
        for source in range(len(documents)):
            for name in links.get(source, ()):
                if not graph.insert_edge(source, documents.lookup(name)):
                    skipped += 1
        
        logger.info(f"Built link graph: {len(documents)} documents, {graph.n_edges} edges, {skipped} links skipped")
        return graph
    
    def insert_edge(self, source: int, target: Optional[int], weight: float = 1.0) -> bool:
        """
        Record an edge from source to target
        
        Self-loops and targets outside [0, N) are skipped.
        
        Returns:
            True if the edge was recorded
        """
        if target is None or not 0 <= target < self.n:
            logger.debug(f"Skipping unresolved link from {source}")
            return False
        if source == target:
            logger.debug(f"Skipping self-link on {source}")
            return False
        if not 0 <= source < self.n:
            raise IndexError(f"source id {source} out of range [0, {self.n})")
        
        self._matrix[source, target] = weight
        self._csr = None
        return True
    
    def has_edge(self, source: int, target: int) -> bool:
        """Check whether source links to target"""
        if not (0 <= source < self.n and 0 <= target < self.n):
            raise IndexError(f"edge ({source}, {target}) out of range [0, {self.n})")
        return bool(self._matrix[source, target] != 0)
    
    @property
    def matrix(self) -> csr_matrix:
        """CSR view of the adjacency matrix, rows are sources"""
        if self._csr is None:
            self._csr = self._matrix.tocsr()
            self._csr.eliminate_zeros()
        return self._csr
    
    @property
    def n_edges(self) -> int:
        return int(self.matrix.nnz)
    
    def out_degrees(self) -> np.ndarray:
        """Outbound edge count for every document"""
        return np.asarray((self.matrix != 0).sum(axis=1), dtype=np.float64).ravel()
    
    def in_degrees(self) -> np.ndarray:
        """Inbound edge count for every document"""
        return np.asarray((self.matrix != 0).sum(axis=0), dtype=np.float64).ravel()
    
    def out_degree(self, doc_id: int) -> int:
        self._check_id(doc_id)
        return int(self.out_degrees()[doc_id])
    
    def in_degree(self, doc_id: int) -> int:
        self._check_id(doc_id)
        return int(self.in_degrees()[doc_id])
    
    def _check_id(self, doc_id: int):
        if not 0 <= doc_id < self.n:
            raise IndexError(f"document id {doc_id} out of range [0, {self.n})")
    
    def edges(self) -> Iterator[Tuple[int, int]]:
        """Iterate (source, target) pairs in row-major order"""
        m = self.matrix
        for source in range(self.n):
            for target in sorted(m.indices[m.indptr[source]:m.indptr[source + 1]]):
                yield source, int(target)
