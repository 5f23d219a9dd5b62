# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module owns the connection to the hosted Supabase project.
# It implements the singleton pattern to reuse a single service client for
# table access, and hands out short-lived anon clients for admin sign-in
# (sign-in stores a session on the client, so it must never be shared).
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   client = SupabaseClient.get_client()
#   client.table("posts").select("*").limit(10).execute()
# =============================================================================

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from supabase import create_client, Client

from app.config import settings

# Set up logging for this module
logger = logging.getLogger(__name__)

# PostgREST code returned by .single() when no row matches
NO_ROWS_CODE = "PGRST116"


class SupabaseClientError(Exception):
    """
    Error creating or configuring a Supabase client.

    Query failures are reported by the entity client instead.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class SupabaseClient:
    """
    Holder for the shared Supabase client.

    All methods are class methods for easy access without instantiation.

    Example:
        client = SupabaseClient.get_client()
        response = client.table("services").select("id").limit(1).execute()
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses the service_role key. Row-level security policies still apply
        to any policy written against it, so callers must treat every
        request as potentially rejected.

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    @classmethod
    def create_auth_client(cls) -> Client:
        """
        Create a fresh anon-key client for password sign-in.

        Raises:
            SupabaseClientError: If client creation fails
        """
        try:
            return create_client(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY)
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to create Supabase auth client: {e}",
                code="AUTH_CLIENT_INIT_FAILED",
                suggestion="Check SUPABASE_URL and SUPABASE_ANON_KEY in your .env file"
            )

    @classmethod
    def reset(cls) -> None:
        """Drop the cached client (used by tests and after key rotation)."""
        cls._instance = None

    @staticmethod
    def normalize_id(value: str | int | UUID) -> str | int:
        """Convert UUIDs to strings for queries; leave other ids untouched."""
        return str(value) if isinstance(value, UUID) else value

    @staticmethod
    def is_no_rows_error(error: Exception) -> bool:
        """Check whether a PostgREST error means 'no rows matched'."""
        return NO_ROWS_CODE in str(error) or getattr(error, "code", None) == NO_ROWS_CODE

    @staticmethod
    def error_message(error: Exception) -> str:
        """Extract the backing library's message, verbatim."""
        message = getattr(error, "message", None)
        return message if isinstance(message, str) and message else str(error)
