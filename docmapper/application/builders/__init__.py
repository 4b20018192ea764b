from .query_filter import QueryFilter
from .update_many_builder import UpdateManyBuilder

__all__ = ["QueryFilter", "UpdateManyBuilder"]
