"""
Base service class.
Services own a request's business logic: they coordinate repositories, commit
the session and submit notifications after a successful commit.
"""

from abc import ABC


class BaseService(ABC):
    """Base service class for all services."""
    pass
