"""
Edge weight derivation

For every edge j -> i of the link graph:

    W_in(j, i)  = in(i) / sum(in(k) for k in out-neighbours of j)
    W_out(j, i) = out'(i) / sum(out'(k) for k in out-neighbours of j)

where out'(x) is the out-degree of x, or 0.5 when x is dangling.
Both weight graphs share the link graph's sparsity pattern and depend only
on the cached degrees, so they are built once per run.
"""

import logging
import numpy as np
from scipy.sparse import csr_matrix
from dataclasses import dataclass
from typing import Optional

from shared.config import settings

from .documents import DocumentSet
from .link_graph import LinkGraph

logger = logging.getLogger(__name__)

ZERO_DENOMINATOR_FALLBACK = 0.5


@dataclass
class DerivedWeights:
    """Incoming- and outgoing-weight graphs for one run"""
    incoming: csr_matrix
    outgoing: csr_matrix
    
    def combined(self) -> csr_matrix:
        """Element-wise W_out * W_in, rows are sources"""
        return csr_matrix(self.outgoing.multiply(self.incoming))


def _edge_weights(adjacency: csr_matrix, numerator: np.ndarray,
                  denominator: np.ndarray) -> csr_matrix:
    """Place numerator[target] / denominator[source] on every edge"""
    coo = adjacency.tocoo()
    with np.errstate(divide="ignore", invalid="ignore"):
        data = numerator[coo.col] / denominator[coo.row]
    return csr_matrix((data, (coo.row, coo.col)), shape=adjacency.shape)


def incoming_weights(adjacency: csr_matrix, in_degree: np.ndarray) -> csr_matrix:
    """
    Compute W_in for every edge
    
    A referring document whose out-neighbours all have in-degree 0 has a
    zero denominator. That case is left unguarded and yields non-finite
    weights on its edges.
    """
    presence = (adjacency != 0).astype(np.float64)
    totals = presence @ in_degree
    
    degenerate = np.flatnonzero((totals == 0) & (np.diff(presence.indptr) > 0))
    if len(degenerate):
        logger.warning(f"Zero incoming-weight denominator for documents {degenerate.tolist()}, weights are non-finite")
    
    return _edge_weights(presence, in_degree, totals)


def outgoing_weights(adjacency: csr_matrix, out_degree: np.ndarray,
                     dangling_out_degree: Optional[float] = None) -> csr_matrix:
    """Compute W_out for every edge, crediting dangling targets"""
    if dangling_out_degree is None:
        dangling_out_degree = settings.dangling_out_degree
    
    presence = (adjacency != 0).astype(np.float64)
    effective = np.where(out_degree == 0, dangling_out_degree, out_degree)
    
    totals = presence @ effective
    totals[totals == 0] = ZERO_DENOMINATOR_FALLBACK
    
    return _edge_weights(presence, effective, totals)


def derive_weights(documents: DocumentSet, graph: LinkGraph) -> DerivedWeights:
    """
    Build both derived weight graphs
    
    Degrees are taken from the document set, which must already hold the
    degrees of this graph.
    
    Returns:
        DerivedWeights with the same topology as the link graph
    """
    if len(documents) != graph.n:
        raise ValueError(f"document set has {len(documents)} documents, graph has {graph.n}")
    
    adjacency = graph.matrix
    weights = DerivedWeights(
        incoming=incoming_weights(adjacency, documents.in_degree),
        outgoing=outgoing_weights(adjacency, documents.out_degree)
    )
    
    logger.debug(f"Derived weights for {adjacency.nnz} edges")
    return weights
