"""Centralized authentication dependencies.

Provides the user-scoped Supabase client and the resolved caller identity
(``AuthContext``) that the transaction routes scope every query by.
"""

import os
from dataclasses import dataclass

from fastapi import Depends, Header
from supabase import Client, create_client

from apps.api.core.errors import AuthenticationError


@dataclass(frozen=True)
class AuthContext:
    """Identity of the caller: the user and the tenant (organization) they act for."""

    subject_id: str
    tenant_id: str


def _get_supabase_url() -> str:
    url = os.environ.get("SUPABASE_URL") or os.environ.get("NEXT_PUBLIC_SUPABASE_URL")
    if not url:
        raise RuntimeError("SUPABASE_URL is not configured")
    return url


def _get_supabase_anon_key() -> str:
    key = os.environ.get("SUPABASE_ANON_KEY") or os.environ.get("NEXT_PUBLIC_SUPABASE_ANON_KEY")
    if not key:
        raise RuntimeError("SUPABASE_ANON_KEY is not configured")
    return key


async def get_user_token(authorization: str = Header(default="")) -> str:
    """Extract Bearer token from Authorization header.

    Returns the raw JWT string.
    """
    if not authorization.startswith("Bearer "):
        raise AuthenticationError(
            "Missing or invalid Authorization header. Expected: Bearer <token>"
        )

    token = authorization[7:].strip()
    if not token:
        raise AuthenticationError("Missing bearer token")
    return token


async def get_user_client(token: str = Depends(get_user_token)) -> Client:
    """Provide a Supabase client authenticated with the user's JWT.

    RLS policies will be enforced for all queries.

    Note: We pass an empty string as the refresh token because the API
    is stateless; each request carries a fresh token from the client.
    The backend never refreshes tokens.
    """
    client = create_client(_get_supabase_url(), _get_supabase_anon_key())
    client.auth.set_session(token, "")
    return client


def resolve_auth_context(user) -> AuthContext:
    """Build an AuthContext from a Supabase user.

    The tenant is ``app_metadata.organization_id``; users without an
    organization act as their own tenant.
    """
    metadata = getattr(user, "app_metadata", None)
    organization_id = metadata.get("organization_id") if isinstance(metadata, dict) else None
    return AuthContext(subject_id=str(user.id), tenant_id=str(organization_id or user.id))


async def get_auth_context(client: Client = Depends(get_user_client)) -> AuthContext:
    """Resolve the caller's identity, rejecting tokens Supabase does not accept."""
    user_response = client.auth.get_user()
    if not user_response or not user_response.user:
        raise AuthenticationError("Invalid bearer token")
    return resolve_auth_context(user_response.user)
