"""
Document collection

Documents are addressed by dense integer ids assigned in insertion order.
Per-document state lives in parallel numpy arrays indexed by id, so the
link graphs only ever refer to documents by integer.
"""

import numpy as np
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional


@dataclass(frozen=True)
class Document:
    """Read-only view of one document's state"""
    id: int
    name: str
    rank: float
    previous_rank: float
    out_degree: float
    in_degree: float


class DocumentSet:
    """
    Ordered set of documents with rank and degree state
    
    Duplicate names are kept as distinct documents; name lookup
    resolves to the first one inserted.
    """
    
    def __init__(self, names: Optional[List[str]] = None):
        self._names: List[str] = []
        self._index: Dict[str, int] = {}
        
        self.rank = np.zeros(0, dtype=np.float64)
        self.previous_rank = np.zeros(0, dtype=np.float64)
        self.out_degree = np.zeros(0, dtype=np.float64)
        self.in_degree = np.zeros(0, dtype=np.float64)
        
        for name in names or []:
            self.add(name)
    
    def add(self, name: str) -> int:
        """Append a document and return its id"""
        doc_id = len(self._names)
        self._names.append(name)
        self._index.setdefault(name, doc_id)
        
        self.rank = np.append(self.rank, 0.0)
        self.previous_rank = np.append(self.previous_rank, 0.0)
        self.out_degree = np.append(self.out_degree, 0.0)
        self.in_degree = np.append(self.in_degree, 0.0)
        return doc_id
    
    def lookup(self, name: str) -> Optional[int]:
        """Return the id for a document name, or None if unknown"""
        return self._index.get(name)
    
    def get(self, doc_id: int) -> Document:
        """Return the document with the given id"""
        if not 0 <= doc_id < len(self._names):
            raise IndexError(f"document id {doc_id} out of range [0, {len(self._names)})")
        
        return Document(
            id=doc_id,
            name=self._names[doc_id],
            rank=float(self.rank[doc_id]),
            previous_rank=float(self.previous_rank[doc_id]),
            out_degree=float(self.out_degree[doc_id]),
            in_degree=float(self.in_degree[doc_id])
        )
    
    @property
    def names(self) -> List[str]:
        return list(self._names)
    
    def __len__(self) -> int:
        return len(self._names)
    
    def __iter__(self) -> Iterator[Document]:
        for doc_id in range(len(self._names)):
            yield self.get(doc_id)
    
    def reset(self):
        """Set every rank to 1/N and clear previous ranks and degrees"""
        n = len(self._names)
        if n == 0:
            return
        
        self.rank.fill(1.0 / n)
        self.previous_rank.fill(0.0)
        self.out_degree.fill(0.0)
        self.in_degree.fill(0.0)
    
    def assign_degrees(self, out_degree: np.ndarray, in_degree: np.ndarray):
        """Cache per-document degree counts"""
        n = len(self._names)
        if len(out_degree) != n or len(in_degree) != n:
            raise ValueError(f"degree arrays must have length {n}")
        
        self.out_degree[:] = out_degree
        self.in_degree[:] = in_degree
    
    def snapshot(self):
        """Copy every rank into previous_rank"""
        self.previous_rank[:] = self.rank
    
    def aggregate_difference(self) -> float:
        """Sum of |rank - previous_rank| over all documents"""
        return float(np.abs(self.rank - self.previous_rank).sum())
