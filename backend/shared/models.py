"""
Pydantic models for ranking parameters and results
"""

from pydantic import BaseModel, Field


# Request Models
class RankingParameters(BaseModel):
    """Parameters accepted by the rank computation"""
    damping: float = Field(..., gt=0.0, lt=1.0, description="Damping factor d")
    threshold: float = Field(..., ge=0.0, description="Convergence threshold for the aggregate rank change")
    max_iterations: int = Field(..., ge=1, description="Iteration ceiling, rounds run while the counter is below it")


# Response Models
class RankedDocument(BaseModel):
    """Single row of the ranking output"""
    name: str
    out_degree: int = Field(..., ge=0)
    rank: float
    
    def render(self, precision: int = 7) -> str:
        """Render as a `name, out_degree, rank` line"""
        return f"{self.name}, {self.out_degree}, {self.rank:.{precision}f}"
