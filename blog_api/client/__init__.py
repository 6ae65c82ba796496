"""Клиентский контейнер состояния для Blog API."""

from .api_client import ApiError, BlogApiClient
from .state import AppState, reduce
from .store import AppStore

__all__ = ["ApiError", "AppState", "AppStore", "BlogApiClient", "reduce"]
