"""Request actor resolution.

Every cart, checkout and admin call is scoped to an ``Actor``: either an
authenticated user (bearer JWT) or a guest identified by an opaque session
token carried in a cookie. The actor is resolved once per request by the
FastAPI dependencies below and then passed explicitly into commands.

Cookie attributes follow the deployment: a configured cookie domain is used
for cross-subdomain sharing, except when the request comes from a local host.
The cookie is deliberately readable by client scripts (not HttpOnly).
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from uuid import uuid4

import jwt
import structlog
from fastapi import Depends, Request, Response

from shared.errors import ForbiddenError, UnauthorizedError
from shared.settings import get_settings

logger = structlog.get_logger(__name__)

GUEST = "guest"
USER = "user"


@dataclass(frozen=True)
class Actor:
    """Resolved identity scoping cart and order operations."""

    kind: str
    key: str
    user_id: str | None = None
    session_token: str | None = None
    roles: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def guest(cls, session_token: str) -> "Actor":
        return cls(kind=GUEST, key=guest_key(session_token), session_token=session_token)

    @classmethod
    def user(cls, user_id: str, roles=(), session_token: str | None = None) -> "Actor":
        return cls(
            kind=USER,
            key=f"user:{user_id}",
            user_id=str(user_id),
            session_token=session_token,
            roles=tuple(roles),
        )

    @property
    def is_authenticated(self) -> bool:
        return self.kind == USER

    @property
    def guest_cart_key(self) -> str | None:
        """Cart key of the guest session riding along with this request, if any."""
        return guest_key(self.session_token) if self.session_token else None

    def has_any_role(self, roles) -> bool:
        return bool(set(self.roles) & set(roles))


def guest_key(session_token: str) -> str:
    return f"guest:{session_token}"


def new_session_token() -> str:
    return f"session_{uuid4()}"


def decode_token(token: str) -> dict:
    """Decode and verify a bearer token, returning its claims."""
    settings = get_settings()
    try:
        claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError as exc:
        raise UnauthorizedError("Token has expired") from exc
    except jwt.InvalidTokenError as exc:
        raise UnauthorizedError("Invalid token") from exc

    if not claims.get("user_id"):
        raise UnauthorizedError("Token is missing the user_id claim")
    return claims


def issue_token(user_id: str, roles=(), expires_in: int = 3600) -> str:
    """Sign a bearer token for ``user_id``. Used by tooling and tests."""
    settings = get_settings()
    payload = {
        "user_id": str(user_id),
        "roles": list(roles),
        "exp": datetime.now(UTC) + timedelta(seconds=expires_in),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def _bearer_token(request: Request) -> str | None:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def resolve_actor(request: Request) -> Actor | None:
    """Resolve the actor for ``request`` without side effects.

    Returns ``None`` when the request is neither authenticated nor carries a
    guest session cookie.
    """
    settings = get_settings()
    session_token = request.cookies.get(settings.session_cookie_name) or None

    token = _bearer_token(request)
    if token is not None:
        claims = decode_token(token)
        return Actor.user(
            claims["user_id"],
            roles=claims.get("roles") or (),
            session_token=session_token,
        )

    if session_token:
        return Actor.guest(session_token)
    return None


def _is_secure(request: Request) -> bool:
    return request.url.scheme == "https" or request.headers.get("X-Forwarded-Proto", "").lower() == "https"


def set_session_cookie(request: Request, response: Response, session_token: str) -> None:
    """Attach the guest session cookie to ``response``."""
    settings = get_settings()
    secure = _is_secure(request)
    host = (request.url.hostname or "").lower()

    domain = settings.cookie_domain
    if host in settings.local_hosts:
        domain = None

    response.set_cookie(
        key=settings.session_cookie_name,
        value=session_token,
        max_age=settings.session_cookie_max_age,
        path="/",
        domain=domain,
        secure=secure,
        httponly=False,
        samesite="none" if domain and secure else "lax",
    )


# ---------------------------------------------------------------------------
# FastAPI dependencies
# ---------------------------------------------------------------------------
def optional_actor(request: Request) -> Actor | None:
    return resolve_actor(request)


def session_actor(request: Request, response: Response) -> Actor:
    """Resolve the actor, minting a guest session when there is none."""
    actor = resolve_actor(request)
    if actor is not None:
        return actor

    session_token = new_session_token()
    set_session_cookie(request, response, session_token)
    logger.debug("Issued guest session", session_token=session_token)
    return Actor.guest(session_token)


def require_actor(actor: Actor | None = Depends(optional_actor)) -> Actor:
    if actor is None:
        raise UnauthorizedError("No session or credentials supplied")
    return actor


def require_roles(*roles: str):
    """Dependency factory enforcing that the caller holds one of ``roles``.

    With no roles given, the configured admin roles apply.
    """

    def _dependency(actor: Actor | None = Depends(optional_actor)) -> Actor:
        if actor is None or not actor.is_authenticated:
            raise UnauthorizedError("Authentication required")
        required = roles or tuple(get_settings().admin_roles)
        if not actor.has_any_role(required):
            raise ForbiddenError("Insufficient role", details={"required_roles": list(required)})
        return actor

    return _dependency
