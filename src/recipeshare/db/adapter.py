"""
Backend Client Protocol.

Repository functions receive the backend client as an argument instead of
reaching for a global. Anything that looks like a Supabase client works:
the real `supabase.Client`, or the in-memory fake used by the tests.

The surface used by this package is the PostgREST query builder
(`table()`), stored procedures (`rpc()`), `auth` and `storage`.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class BackendClient(Protocol):
    """
    Abstract Supabase-shaped client.

    `table()` returns a query builder supporting the fluent API
    (.select(), .insert(), .delete(), .eq(), .in_(), .order(), .execute()).
    `rpc()` returns an object with .execute() that yields .data.
    """

    auth: Any
    storage: Any

    def table(self, name: str) -> Any:
        """Return a query builder for the given table."""
        ...

    def rpc(self, fn: str, params: dict) -> Any:
        """Call a database function."""
        ...
