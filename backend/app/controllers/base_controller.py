"""
Base controller class.
Controllers are built per request from a session and hand work to services.
"""

from abc import ABC


class BaseController(ABC):
    """Base controller class for all controllers."""
    pass
