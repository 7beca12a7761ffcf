"""
Health check response schemas.
"""

from pydantic import BaseModel, Field
from typing import Dict


class HealthResponse(BaseModel):
    """Health check response schema."""
    status: str
    version: str
    uptime: str
    checks: Dict[str, str] = Field(default_factory=dict)
