"""
sichr_shared — configuration, constants, models and the Supabase client
shared by the SichrPlace performance service.

Usage:
    from sichr_shared.config import settings
    from sichr_shared.db import get_supabase_client
    from sichr_shared.models.listings import SearchFilters, OptimizedListing
    from sichr_shared.constants import CACHE_TTL_SECONDS, IMAGE_VARIANTS
"""

__version__ = "0.1.0"
