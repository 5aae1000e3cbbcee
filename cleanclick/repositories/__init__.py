from functools import lru_cache

from cleanclick.core.config import settings
from cleanclick.repositories.base import Repository


@lru_cache()
def get_repository() -> Repository:
    """Build the repository selected by ``STORAGE_BACKEND``."""
    backend = settings.storage_backend
    strategy = settings.DEFAULT_PRICING_STRATEGY

    if backend == "supabase":
        from cleanclick.core.supabase_client import get_supabase_client
        from cleanclick.repositories.supabase import SupabaseRepository

        return SupabaseRepository(get_supabase_client(), pricing_strategy=strategy)

    if backend == "sql":
        from cleanclick.core.db import get_engine, init_db
        from cleanclick.repositories.sql import SqlRepository

        engine = get_engine()
        init_db(engine)
        return SqlRepository(engine, pricing_strategy=strategy)

    from cleanclick.repositories.json_file import JsonFileRepository

    return JsonFileRepository(settings.JSON_DB_PATH, pricing_strategy=strategy)


__all__ = ["Repository", "get_repository"]
