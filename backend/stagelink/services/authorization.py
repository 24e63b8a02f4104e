"""
StageLink Backend — Authorization Gate
========================================

What:  One policy table mapping (entity, action) to an owner-keyed predicate.
Why:   Every access rule lives here instead of being scattered across
       services, so "who may do what" can be read (and tested) in one place.
How:   Services call `authorize(db, requester, entity, action, row)` before
       flushing a write or returning a row. The predicate gets the session
       (some rules need a lookup, e.g. "owning venue of the job"), the
       requester profile (None for anonymous reads) and the row.

Failure surfacing:
    hide_row=True   → NotFoundError. The caller cannot tell "exists but not
                      yours" from "does not exist".
    hide_row=False  → PermissionDeniedError with a readable message. Used for
                      create-time rules that reveal nothing about a row
                      ("Only venue profiles can post jobs").
    no entry        → PermissionDeniedError. Unlisted actions are denied.

Policy table:
    ┌──────────────────────┬────────────────────────────┬─────────────────────────┬──────────────────┬─────────────────────┐
    │ Entity               │ create                     │ read                    │ update           │ delete              │
    ├──────────────────────┼────────────────────────────┼─────────────────────────┼──────────────────┼─────────────────────┤
    │ profile              │ (identity service only)    │ anyone                  │ self             │ self                │
    │ media item           │ owner                      │ anyone                  │ owner            │ owner               │
    │ venue                │ any signed-in profile      │ anyone                  │ owner (if set)   │ owner (if set)      │
    │ job                  │ owner, venue type          │ anyone                  │ owner            │ owner               │
    │ job application      │ applicant, artist type     │ applicant / job's venue │ job's venue      │ n/a                 │
    │ group                │ creator, artist type       │ anyone                  │ creator          │ creator             │
    │ group member         │ group creator              │ anyone                  │ n/a              │ creator / self      │
    │ group job application│ group member               │ members / job's venue   │ job's venue      │ n/a                 │
    │ message              │ sender, not to self        │ sender / receiver       │ sender / receiver│ n/a                 │
    └──────────────────────┴────────────────────────────┴─────────────────────────┴──────────────────┴─────────────────────┘
"""

import logging
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from stagelink.exceptions import NotFoundError, PermissionDeniedError
from stagelink.models import Group, GroupMember, Job, Profile

logger = logging.getLogger(__name__)


class Entity(str, Enum):
    PROFILE = "profile"
    MEDIA_ITEM = "media item"
    VENUE = "venue"
    JOB = "job"
    JOB_APPLICATION = "job application"
    GROUP = "group"
    GROUP_MEMBER = "group member"
    GROUP_JOB_APPLICATION = "group job application"
    MESSAGE = "message"


class Action(str, Enum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


Predicate = Callable[[AsyncSession, Optional[Profile], Any], Awaitable[bool]]


@dataclass(frozen=True)
class Policy:
    check: Predicate
    message: str = "You do not have permission to perform this action"
    hide_row: bool = True


# ══════════════════════════════════════════════════════════════════════════
# Predicates
# ══════════════════════════════════════════════════════════════════════════


async def _anyone(db: AsyncSession, requester: Optional[Profile], row: Any) -> bool:
    return True


async def _signed_in(db: AsyncSession, requester: Optional[Profile], row: Any) -> bool:
    return requester is not None


def _owner(attr: str) -> Predicate:
    """requester.id == row.<attr>. A NULL owner matches nobody."""

    async def check(db: AsyncSession, requester: Optional[Profile], row: Any) -> bool:
        owner_id = getattr(row, attr)
        return requester is not None and owner_id is not None and owner_id == requester.id

    return check


def _owner_of_type(attr: str, profile_type: str) -> Predicate:
    is_owner = _owner(attr)

    async def check(db: AsyncSession, requester: Optional[Profile], row: Any) -> bool:
        if requester is None or requester.profile_type != profile_type:
            return False
        return await is_owner(db, requester, row)

    return check


def _any_of(*predicates: Predicate) -> Predicate:
    async def check(db: AsyncSession, requester: Optional[Profile], row: Any) -> bool:
        for predicate in predicates:
            if await predicate(db, requester, row):
                return True
        return False

    return check


async def _job_venue_id(db: AsyncSession, job_id: uuid.UUID) -> Optional[uuid.UUID]:
    return await db.scalar(select(Job.venue_id).where(Job.id == job_id))


async def _group_creator_id(db: AsyncSession, group_id: uuid.UUID) -> Optional[uuid.UUID]:
    return await db.scalar(select(Group.created_by).where(Group.id == group_id))


async def is_group_member(db: AsyncSession, group_id: uuid.UUID, profile_id: uuid.UUID) -> bool:
    """True when `profile_id` currently has a membership row in `group_id`."""
    return bool(
        await db.scalar(
            select(
                exists().where(
                    GroupMember.group_id == group_id,
                    GroupMember.profile_id == profile_id,
                )
            )
        )
    )


async def _owns_referenced_job(db: AsyncSession, requester: Optional[Profile], row: Any) -> bool:
    if requester is None:
        return False
    return await _job_venue_id(db, row.job_id) == requester.id


async def _creates_referenced_group(db: AsyncSession, requester: Optional[Profile], row: Any) -> bool:
    if requester is None:
        return False
    return await _group_creator_id(db, row.group_id) == requester.id


async def _member_of_referenced_group(db: AsyncSession, requester: Optional[Profile], row: Any) -> bool:
    if requester is None:
        return False
    return await is_group_member(db, row.group_id, requester.id)


async def _sends_to_someone_else(db: AsyncSession, requester: Optional[Profile], row: Any) -> bool:
    return (
        requester is not None
        and row.sender_id == requester.id
        and row.sender_id != row.receiver_id
    )


_sender_or_receiver = _any_of(_owner("sender_id"), _owner("receiver_id"))


# ══════════════════════════════════════════════════════════════════════════
# Policy Table
# ══════════════════════════════════════════════════════════════════════════

POLICIES: Dict[Tuple[Entity, Action], Policy] = {
    # Profiles are created by IdentityService inside the sign-up transaction.
    (Entity.PROFILE, Action.READ): Policy(_anyone),
    (Entity.PROFILE, Action.UPDATE): Policy(_owner("id")),
    (Entity.PROFILE, Action.DELETE): Policy(_owner("id")),

    (Entity.MEDIA_ITEM, Action.CREATE): Policy(
        _owner("profile_id"),
        message="You can only add media to your own profile",
        hide_row=False,
    ),
    (Entity.MEDIA_ITEM, Action.READ): Policy(_anyone),
    (Entity.MEDIA_ITEM, Action.UPDATE): Policy(_owner("profile_id")),
    (Entity.MEDIA_ITEM, Action.DELETE): Policy(_owner("profile_id")),

    (Entity.VENUE, Action.CREATE): Policy(
        _signed_in,
        message="You must be signed in to add a venue",
        hide_row=False,
    ),
    (Entity.VENUE, Action.READ): Policy(_anyone),
    (Entity.VENUE, Action.UPDATE): Policy(_owner("owner_id")),
    (Entity.VENUE, Action.DELETE): Policy(_owner("owner_id")),

    (Entity.JOB, Action.CREATE): Policy(
        _owner_of_type("venue_id", "venue"),
        message="Only venue profiles can post jobs",
        hide_row=False,
    ),
    (Entity.JOB, Action.READ): Policy(_anyone),
    (Entity.JOB, Action.UPDATE): Policy(_owner("venue_id")),
    (Entity.JOB, Action.DELETE): Policy(_owner("venue_id")),

    (Entity.JOB_APPLICATION, Action.CREATE): Policy(
        _owner_of_type("artist_id", "artist"),
        message="Only artist profiles can apply to jobs",
        hide_row=False,
    ),
    (Entity.JOB_APPLICATION, Action.READ): Policy(
        _any_of(_owner("artist_id"), _owns_referenced_job),
    ),
    (Entity.JOB_APPLICATION, Action.UPDATE): Policy(_owns_referenced_job),

    (Entity.GROUP, Action.CREATE): Policy(
        _owner_of_type("created_by", "artist"),
        message="Only artist profiles can create groups",
        hide_row=False,
    ),
    (Entity.GROUP, Action.READ): Policy(_anyone),
    (Entity.GROUP, Action.UPDATE): Policy(_owner("created_by")),
    (Entity.GROUP, Action.DELETE): Policy(_owner("created_by")),

    (Entity.GROUP_MEMBER, Action.CREATE): Policy(
        _creates_referenced_group,
        message="Only the group creator can add members",
        hide_row=False,
    ),
    (Entity.GROUP_MEMBER, Action.READ): Policy(_anyone),
    (Entity.GROUP_MEMBER, Action.DELETE): Policy(
        _any_of(_creates_referenced_group, _owner("profile_id")),
    ),

    (Entity.GROUP_JOB_APPLICATION, Action.CREATE): Policy(
        _member_of_referenced_group,
        message="Only group members can apply on behalf of the group",
        hide_row=False,
    ),
    (Entity.GROUP_JOB_APPLICATION, Action.READ): Policy(
        _any_of(_member_of_referenced_group, _owns_referenced_job),
    ),
    (Entity.GROUP_JOB_APPLICATION, Action.UPDATE): Policy(_owns_referenced_job),

    (Entity.MESSAGE, Action.CREATE): Policy(
        _sends_to_someone_else,
        message="You can only send messages as yourself, to someone else",
        hide_row=False,
    ),
    (Entity.MESSAGE, Action.READ): Policy(_sender_or_receiver),
    (Entity.MESSAGE, Action.UPDATE): Policy(_sender_or_receiver),
}


async def authorize(
    db: AsyncSession,
    requester: Optional[Profile],
    entity: Entity,
    action: Action,
    row: Any,
) -> None:
    """
    Evaluate the policy for (entity, action) against `row`.

    Raises:
        NotFoundError:          Predicate failed on a row the caller may not see or own
        PermissionDeniedError:  Create-time rule failed, or the action is not allowed at all
    """
    policy = POLICIES.get((entity, action))
    requester_id = requester.id if requester is not None else None

    if policy is None:
        logger.info("Denied %s %s for %s: no policy", action.value, entity.value, requester_id)
        raise PermissionDeniedError(
            message=f"Cannot {action.value} a {entity.value}",
            context={"entity": entity.value, "action": action.value},
        )

    if await policy.check(db, requester, row):
        return

    row_id = getattr(row, "id", None)
    logger.info(
        "Denied %s %s %s for %s",
        action.value,
        entity.value,
        row_id,
        requester_id,
    )
    if policy.hide_row:
        raise NotFoundError(
            resource=entity.value,
            resource_id=str(row_id) if row_id is not None else None,
        )
    raise PermissionDeniedError(
        message=policy.message,
        context={"entity": entity.value, "action": action.value},
    )
