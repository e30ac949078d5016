"""
Shared configuration management for the ranking service
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""
    
    # Collection input
    collection_dir: str = "."
    collection_file: str = "collection.txt"
    link_file_suffix: str = ".txt"
    link_end_marker: str = "#end"
    
    # Application
    log_level: str = "INFO"
    
    # PageRank
    pagerank_damping: float = 0.85
    pagerank_diff_threshold: float = 0.00001
    pagerank_iterations: int = 1000
    dangling_out_degree: float = 0.5
    
    # Output
    output_precision: int = 7
    output_limit: Optional[int] = None
    
    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
        "extra": "ignore"
    }


# Global settings instance
settings = Settings()
