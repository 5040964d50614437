"""
Thin wrapper over the Supabase (PostgREST) table API.

Collections are plain tables in the configured schema; every document carries
an ``id`` primary key. No retries: provider errors propagate to the caller.
"""

from supabase import Client
from pydantic import BaseModel
from typing import Any, Dict, Iterable, List, Optional, Tuple
import logging

from keno_admin.config import settings

logger = logging.getLogger(__name__)


class DocumentPage(BaseModel):
    documents: List[Dict[str, Any]]
    total: int


class DocumentStore:
    def __init__(self, supabase: Client, database_id: Optional[str] = None):
        self.supabase = supabase
        self.database_id = database_id or settings.database_id

    def _table(self, collection_id: str):
        if self.database_id == "public":
            return self.supabase.table(collection_id)
        return self.supabase.schema(self.database_id).table(collection_id)

    def create(self, collection_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        result = self._table(collection_id).insert(data).execute()
        if not result.data:
            raise RuntimeError(f"Insert into {collection_id} returned no document")
        return result.data[0]

    def get(self, collection_id: str, document_id: str) -> Optional[Dict[str, Any]]:
        return self.find_one(collection_id, id=document_id)

    def find_one(self, collection_id: str, **filters: Any) -> Optional[Dict[str, Any]]:
        query = self._table(collection_id).select("*")
        for column, value in filters.items():
            query = query.eq(column, value)
        result = query.limit(1).execute()
        return result.data[0] if result.data else None

    def list(
        self,
        collection_id: str,
        filters: Optional[Dict[str, Any]] = None,
        in_filters: Optional[Dict[str, Iterable[Any]]] = None,
        search: Optional[Tuple[str, str]] = None,
        order_by: Optional[str] = None,
        desc: bool = False,
        limit: int = 25,
        offset: int = 0,
        with_count: bool = False,
    ) -> DocumentPage:
        """List documents.

        ``search`` is a ``(column, term)`` pair matched case-insensitively as a
        substring. ``total`` is the exact match count when ``with_count`` is set,
        otherwise the number of documents returned.
        """
        if with_count:
            query = self._table(collection_id).select("*", count="exact")
        else:
            query = self._table(collection_id).select("*")
        for column, value in (filters or {}).items():
            query = query.eq(column, value)
        for column, values in (in_filters or {}).items():
            query = query.in_(column, list(values))
        if search and search[1]:
            column, term = search
            query = query.ilike(column, f"%{term}%")
        if order_by:
            query = query.order(order_by, desc=desc)
        result = query.limit(limit).offset(offset).execute()
        documents = result.data or []
        total = result.count if with_count and result.count is not None else len(documents)
        return DocumentPage(documents=documents, total=total)

    def update(self, collection_id: str, document_id: str, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        result = self._table(collection_id)\
            .update(data)\
            .eq("id", document_id)\
            .execute()
        return result.data[0] if result.data else None

    def delete(self, collection_id: str, document_id: str) -> bool:
        result = self._table(collection_id)\
            .delete()\
            .eq("id", document_id)\
            .execute()
        return bool(result.data)
