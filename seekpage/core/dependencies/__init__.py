"""FastAPI dependencies shared by feature routers."""

from seekpage.core.dependencies.database import get_db_session
from seekpage.core.dependencies.pagination import PaginationQuery, get_pagination_options

__all__ = ["PaginationQuery", "get_db_session", "get_pagination_options"]
