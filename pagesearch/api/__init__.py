"""
Request/response layer consumed by the web interface and external callers.
"""

from .facade import SearchFacade, FacadeResponse

__all__ = [
    "SearchFacade",
    "FacadeResponse"
]
