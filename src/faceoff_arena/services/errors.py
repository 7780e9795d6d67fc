"""Errors shared by the read and write services."""


class StorageError(Exception):
    """Supabase couldn't serve a request; the message is safe to show users."""
