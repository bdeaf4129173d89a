"""
Recipeshare - Supabase client construction.

Three flavours:
- service client: service-role key, cached, never signs in. Used to
  validate access tokens and by the CLI.
- anon client: fresh per request. Auth flows (sign-in, sign-up) store a
  session on the client, so it must never be shared between users.
- authenticated client: anon client carrying a user's session, so
  row-level security applies to every query it makes.
"""

from supabase import Client, ClientOptions, create_client

from recipeshare.config import settings

# Service-role client, safe to share because it never holds a user session
_service_client: Client | None = None


def _request_options() -> ClientOptions:
    return ClientOptions(auto_refresh_token=False, persist_session=False)


def get_service_client() -> Client:
    """
    Get the service-role Supabase client.

    Uses singleton pattern to reuse connection.
    """
    global _service_client

    if _service_client is None:
        _service_client = create_client(
            settings.supabase_url,
            settings.supabase_service_role_key,
        )

    return _service_client


def create_anon_client() -> Client:
    """Create a fresh anon-key client for a single request."""
    return create_client(
        settings.supabase_url,
        settings.supabase_anon_key,
        options=_request_options(),
    )


def get_authenticated_client(access_token: str, refresh_token: str) -> Client:
    """
    Create a client acting as the signed-in user.

    Setting the session also switches the database and storage
    Authorization headers to the user's token.
    """
    client = create_anon_client()
    client.auth.set_session(access_token, refresh_token)
    return client
