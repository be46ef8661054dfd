"""FastAPI dependencies: the wired services and the acting user."""

from __future__ import annotations

from fastapi import Depends, Header, Request

from storefront.domain.exceptions import UnauthenticatedError, UnauthorizedError
from storefront.domain.model.actor import Actor, parse_role
from storefront.infrastructure.bootstrap import Services
from storefront.infrastructure.config import Settings


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def current_actor(
    x_user_id: str | None = Header(None),
    x_user_role: str | None = Header(None),
) -> Actor:
    """The authenticating proxy in front of the service sets these headers."""
    if not x_user_id or not x_user_id.strip():
        raise UnauthenticatedError("Missing X-User-Id header")
    return Actor(x_user_id.strip(), parse_role(x_user_role))


def staff_actor(actor: Actor = Depends(current_actor)) -> Actor:
    if not actor.is_staff:
        raise UnauthorizedError("This endpoint is for sellers and admins only")
    return actor
