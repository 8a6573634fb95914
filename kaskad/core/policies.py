"""
Row access policies for studios, profiles and gallery_items.

authorize() is evaluated by the routes before every read or write. The API
talks to Supabase with the service role, so nothing below the routes filters
rows on its own.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional

from fastapi import HTTPException, status

from kaskad.config.roles_config import GALLERY_MANAGER_ROLES, STUDIO_MEMBER_ROLES

logger = logging.getLogger(__name__)


class Action(str, Enum):
    SELECT = "select"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


class Decision(str, Enum):
    ALLOW = "allow"
    DENY = "deny"

    def __bool__(self) -> bool:
        return self is Decision.ALLOW


@dataclass(frozen=True)
class Actor:
    """The caller of a request, with the attributes of their profile (if any)."""
    user_id: Optional[str] = None
    email: Optional[str] = None
    studio_id: Optional[str] = None
    role: Optional[str] = None
    is_superadmin: bool = False
    studio_active: bool = False

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @classmethod
    def anonymous(cls) -> "Actor":
        return cls()

    @classmethod
    def from_profile(cls, user: Dict[str, Any], profile: Optional[Dict[str, Any]], studio: Optional[Dict[str, Any]] = None) -> "Actor":
        """Build an actor from the auth user, their profile row and the profile's studio row."""
        if not profile:
            return cls(user_id=user["id"], email=user.get("email"))
        return cls(
            user_id=user["id"],
            email=user.get("email") or profile.get("email"),
            studio_id=profile.get("studio_id"),
            role=profile.get("role"),
            is_superadmin=bool(profile.get("is_superadmin")),
            studio_active=bool(studio and studio.get("active")),
        )


@dataclass(frozen=True)
class Resource:
    table: str
    row: Dict[str, Any] = field(default_factory=dict)


def _in_own_studio(actor: Actor, studio_id: Optional[str]) -> bool:
    return (
        actor.studio_id is not None
        and studio_id is not None
        and str(actor.studio_id) == str(studio_id)
        and actor.studio_active
    )


def studio_policy(actor: Actor, action: Action, row: Dict[str, Any]) -> bool:
    if actor.is_superadmin:
        return True
    return (
        action == Action.SELECT
        and actor.studio_id is not None
        and str(actor.studio_id) == str(row.get("id"))
        and actor.role in STUDIO_MEMBER_ROLES
        and bool(row.get("active", True))
    )


def profile_policy(actor: Actor, action: Action, row: Dict[str, Any]) -> bool:
    if not actor.is_authenticated:
        return False
    if action == Action.SELECT:
        return True
    if action in (Action.INSERT, Action.UPDATE):
        return str(actor.user_id) == str(row.get("id"))
    return False


def gallery_policy(actor: Actor, action: Action, row: Dict[str, Any]) -> bool:
    if action == Action.SELECT and row.get("is_public") is True:
        return True
    if not _in_own_studio(actor, row.get("studio_id")):
        return False
    if action == Action.SELECT:
        return True
    return actor.role in GALLERY_MANAGER_ROLES


POLICIES: Dict[str, Callable[[Actor, Action, Dict[str, Any]], bool]] = {
    "studios": studio_policy,
    "profiles": profile_policy,
    "gallery_items": gallery_policy,
}


def authorize(actor: Actor, action: Action, resource: Resource) -> Decision:
    policy = POLICIES.get(resource.table)
    if policy is None:
        return Decision.DENY
    return Decision.ALLOW if policy(actor, Action(action), resource.row) else Decision.DENY


def require(actor: Actor, action: Action, resource: Resource) -> Actor:
    """Raise unless actor may perform action on resource. 401 for anonymous callers, 403 otherwise."""
    if authorize(actor, action, resource):
        return actor
    logger.info(
        "Denied %s on %s row %s for user %s",
        Action(action).value, resource.table, resource.row.get("id"), actor.user_id or "<anonymous>"
    )
    if not actor.is_authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail=f"Not allowed to {Action(action).value} {resource.table}"
    )


def require_update(actor: Actor, table: str, current: Dict[str, Any], changes: Dict[str, Any]) -> Actor:
    """An update must be allowed on the stored row and on the row as it will be written."""
    require(actor, Action.UPDATE, Resource(table, current))
    require(actor, Action.UPDATE, Resource(table, {**current, **changes}))
    return actor


def visible_rows(actor: Actor, table: str, rows):
    """Keep only the rows actor may select."""
    return [row for row in rows if authorize(actor, Action.SELECT, Resource(table, row))]
