"""
Recipeshare - Database access.

Every function takes the Supabase client as its first argument.
"""

from recipeshare.db.adapter import BackendClient
from recipeshare.db.client import create_anon_client, get_authenticated_client, get_service_client

__all__ = [
    "BackendClient",
    "create_anon_client",
    "get_authenticated_client",
    "get_service_client",
]
