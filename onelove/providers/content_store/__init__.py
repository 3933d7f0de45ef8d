"""Content-store adapters (IContentStore implementations)."""

from onelove.providers.content_store.sqlite_provider import SQLiteContentStore
from onelove.providers.content_store.supabase_provider import SupabaseContentStore

__all__ = ["SQLiteContentStore", "SupabaseContentStore"]
