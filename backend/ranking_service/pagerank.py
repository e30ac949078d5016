"""
Weighted PageRank Computation

Ranks a fixed collection of linked documents with a degree-weighted
variant of PageRank:

PR(i) = (1-d)/N + d * Σ PR(j) * W_in(j, i) * W_out(j, i)

Where:
- d = damping factor
- N = number of documents
- the sum runs over every document j linking to i
- W_in / W_out = edge weights derived from in- and out-degrees

Iteration stops once the summed absolute rank change drops below the
threshold, or when the iteration counter reaches max_iterations.
"""

import logging
import sys
import time
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

import numpy as np
from pydantic import ValidationError

from shared.config import settings
from shared.models import RankingParameters, RankedDocument

from .collection import CollectionError, load_collection, rank_documents, format_ranking
from .documents import DocumentSet
from .link_graph import LinkGraph
from .weights import DerivedWeights, derive_weights

logger = logging.getLogger(__name__)


class InvalidParametersError(ValueError):
    """Ranking parameters rejected before iteration"""


class IterationState(str, Enum):
    INITIALIZED = "initialized"
    ITERATING = "iterating"
    CONVERGED = "converged"
    EXHAUSTED = "exhausted"


@dataclass
class RankingResult:
    """Outcome of a completed run"""
    documents: DocumentSet
    state: IterationState
    rounds: int
    difference: float
    computation_time: float = 0.0
    
    @property
    def converged(self) -> bool:
        return self.state == IterationState.CONVERGED


def validate_parameters(damping: float, threshold: float, max_iterations: int) -> RankingParameters:
    """Check ranking parameters, raising InvalidParametersError"""
    try:
        return RankingParameters(damping=damping, threshold=threshold, max_iterations=max_iterations)
    except ValidationError as e:
        raise InvalidParametersError(str(e)) from e


class RankIterator:
    """
    Drives the fixed-point rank iteration
    
    States: INITIALIZED -> ITERATING -> CONVERGED | EXHAUSTED.
    The derived weight graphs are built by initialize() and released
    when run() terminates.
    """
    
    def __init__(self, documents: DocumentSet, graph: LinkGraph,
                 damping: float, threshold: float, max_iterations: int):
        params = validate_parameters(damping, threshold, max_iterations)
        
        if len(documents) == 0:
            raise InvalidParametersError("Cannot rank an empty document set")
        if len(documents) != graph.n:
            raise ValueError(f"document set has {len(documents)} documents, graph has {graph.n}")
        
        self.documents = documents
        self.graph = graph
        self.damping = params.damping
        self.threshold = params.threshold
        self.max_iterations = params.max_iterations
        
        self.state: Optional[IterationState] = None
        self.weights: Optional[DerivedWeights] = None
        self.rounds = 0
        self.difference = params.threshold
        
        self._transfer = None
    
    def initialize(self):
        """Reset ranks to 1/N, cache degrees and build the weight graphs"""
        self.documents.reset()
        self.documents.assign_degrees(self.graph.out_degrees(), self.graph.in_degrees())
        
        self.weights = derive_weights(self.documents, self.graph)
        # Row i holds W_out(j, i) * W_in(j, i) for every referrer j
        self._transfer = self.weights.combined().T.tocsr()
        
        self.rounds = 0
        self.difference = self.threshold
        self.state = IterationState.INITIALIZED
    
    def step(self) -> float:
        """
        Run one update round
        
        Returns:
            Aggregate rank difference for this round
        """
        if self._transfer is None:
            raise RuntimeError("RankIterator.step() called before initialize()")
        
        docs = self.documents
        n = len(docs)
        
        docs.snapshot()
        weight = self._transfer.dot(docs.previous_rank)
        docs.rank[:] = (1 - self.damping) / n + self.damping * weight
        
        self.rounds += 1
        self.difference = docs.aggregate_difference()
        self.state = IterationState.ITERATING
        
        logger.debug(f"Round {self.rounds}: diff = {self.difference:.8f}")
        return self.difference
    
    def release(self):
        """Drop the derived weight graphs"""
        self.weights = None
        self._transfer = None
    
    def run(self) -> RankingResult:
        """
        Iterate until converged or the iteration ceiling is reached
        
        Returns:
            RankingResult holding the settled document set
        """
        start_time = time.time()
        
        logger.info(
            f"Computing PageRank (n={len(self.documents)}, d={self.damping}, "
            f"threshold={self.threshold}, max_iterations={self.max_iterations})"
        )
        
        self.initialize()
        
        iteration = 1
        diff = self.threshold
        while iteration < self.max_iterations and diff >= self.threshold:
            diff = self.step()
            iteration += 1
        
        if diff < self.threshold:
            self.state = IterationState.CONVERGED
            logger.info(f"Converged after {self.rounds} rounds (diff = {diff:.8f})")
        else:
            self.state = IterationState.EXHAUSTED
            logger.info(f"Stopped at iteration ceiling after {self.rounds} rounds (diff = {diff:.8f})")
        
        self.release()
        
        if not np.all(np.isfinite(self.documents.rank)):
            logger.warning("Some ranks are non-finite")
        
        return RankingResult(
            documents=self.documents,
            state=self.state,
            rounds=self.rounds,
            difference=diff,
            computation_time=time.time() - start_time
        )


def compute_pagerank(documents: DocumentSet, graph: LinkGraph, damping: float,
                     threshold: float, max_iterations: int) -> RankingResult:
    """Run the weighted PageRank iteration over a loaded collection"""
    return RankIterator(documents, graph, damping, threshold, max_iterations).run()


def run_pagerank_job(damping: Optional[float] = None,
                     threshold: Optional[float] = None,
                     max_iterations: Optional[int] = None,
                     collection_dir: Optional[str] = None) -> List[RankedDocument]:
    """
    Load a collection, rank it and return the sorted rows
    
    Parameters left as None fall back to settings.
    """
    if damping is None:
        damping = settings.pagerank_damping
    if threshold is None:
        threshold = settings.pagerank_diff_threshold
    if max_iterations is None:
        max_iterations = settings.pagerank_iterations
    
    # Reject bad parameters before touching the collection
    validate_parameters(damping, threshold, max_iterations)
    
    documents, graph = load_collection(collection_dir)
    result = compute_pagerank(documents, graph, damping, threshold, max_iterations)
    
    logger.info(f"PageRank job finished in {result.computation_time:.2f}s ({result.state.value})")
    return rank_documents(result.documents)


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the pagerank command"""
    import argparse
    
    parser = argparse.ArgumentParser(description='Weighted PageRank over a document collection')
    parser.add_argument('damping', type=float, help='Damping factor, in (0, 1)')
    parser.add_argument('diff_pr', type=float, help='Convergence threshold for the summed rank change')
    parser.add_argument('max_iterations', type=int, help='Maximum iteration count')
    parser.add_argument('--collection-dir', default=None, help='Directory holding collection.txt and the link files')
    parser.add_argument('--limit', type=int, default=settings.output_limit, help='Only print the top N documents')
    
    args = parser.parse_args(argv)
    
    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))
    
    try:
        rows = run_pagerank_job(args.damping, args.diff_pr, args.max_iterations, args.collection_dir)
    except (InvalidParametersError, CollectionError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    
    if args.limit is not None:
        rows = rows[:args.limit]
    
    print(format_ranking(rows))
    return 0


if __name__ == "__main__":
    sys.exit(main())
