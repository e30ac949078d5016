"""
Collection loading and ranking output

Reads the collection index (one document name per token) and each
document's link file: a header line, then link targets up to the end
marker. Any missing input aborts the load.
"""

import logging
import os
from typing import Dict, List, Optional, Tuple

from shared.config import settings
from shared.models import RankedDocument
from shared.utils import split_tokens, take_until, link_file_path

from .documents import DocumentSet
from .link_graph import LinkGraph

logger = logging.getLogger(__name__)


class CollectionError(RuntimeError):
    """Collection input is missing or unusable"""


def read_collection(path: str) -> List[str]:
    """Read document names from the collection index file"""
    try:
        with open(path, "r", encoding="utf-8") as f:
            names = split_tokens(f.read())
    except (OSError, UnicodeDecodeError) as e:
        raise CollectionError(f"Cannot read collection file {path}: {e}") from e
    
    if not names:
        raise CollectionError(f"Collection file {path} lists no documents")
    
    return names


def read_links(path: str, end_marker: Optional[str] = None) -> List[str]:
    """
    Read outbound link names from a document's link file
    
    The first line is a header and is skipped. Tokens after the end
    marker are ignored.
    """
    if end_marker is None:
        end_marker = settings.link_end_marker
    
    try:
        with open(path, "r", encoding="utf-8") as f:
            f.readline()
            body = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise CollectionError(f"Cannot read link file {path}: {e}") from e
    
    return take_until(split_tokens(body), end_marker)


def load_collection(collection_dir: Optional[str] = None) -> Tuple[DocumentSet, LinkGraph]:
    """
    Load documents and build the link graph
    
    Args:
        collection_dir: Directory holding the collection and link files
            (defaults to settings.collection_dir)
            
    Returns:
        Tuple of (document set, link graph)
    """
    if collection_dir is None:
        collection_dir = settings.collection_dir
    
    index_path = os.path.join(collection_dir, settings.collection_file)
    documents = DocumentSet(read_collection(index_path))
    logger.info(f"Loaded {len(documents)} documents from {index_path}")
    
    links: Dict[int, List[str]] = {}
    for doc in documents:
        path = link_file_path(collection_dir, doc.name, settings.link_file_suffix)
        links[doc.id] = read_links(path)
    
    return documents, LinkGraph.from_links(documents, links)


def rank_documents(documents: DocumentSet) -> List[RankedDocument]:
    """Sort documents by rank descending, then name ascending"""
    rows = [
        RankedDocument(name=doc.name, out_degree=int(doc.out_degree), rank=doc.rank)
        for doc in documents
    ]
    rows.sort(key=lambda row: (-row.rank, row.name))
    return rows


def format_ranking(rows: List[RankedDocument], precision: Optional[int] = None) -> str:
    """Render ranking rows, one per line"""
    if precision is None:
        precision = settings.output_precision
    return "\n".join(row.render(precision) for row in rows)
