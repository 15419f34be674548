from .criteria import Criteria
from .exceptions import (
    CollaboratorError,
    CriteriaError,
    EmptySelectorError,
    QueryFailedError,
    QueryMethodNotFoundError,
)
from .ports import IQueryable, IRecordStore, ISearchBackend
from .response import SearchResponse, SearchResponseBody
from .result import CacheState, ResultCache
from .scope import Queryable, scope_method
from .settings import DEFAULT_SETTINGS, CriteriaSettings

__all__ = [
    # Core types
    "Criteria",
    "CacheState",
    "ResultCache",
    # Collaborators
    "ISearchBackend",
    "IRecordStore",
    "IQueryable",
    "Queryable",
    "scope_method",
    # Response
    "SearchResponse",
    "SearchResponseBody",
    # Settings
    "CriteriaSettings",
    "DEFAULT_SETTINGS",
    # Exceptions
    "CriteriaError",
    "EmptySelectorError",
    "QueryFailedError",
    "QueryMethodNotFoundError",
    "CollaboratorError",
]
