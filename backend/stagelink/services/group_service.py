"""
StageLink Backend — Group Registry Service
============================================

What:  Artist-formed groups, their members and their job applications.
Who:   Called by the /api/groups route handlers.

Two-step creation:
    ┌────────────────┐  COMMIT  ┌──────────────────────────┐
    │ INSERT groups  │─────────▶│ INSERT group_members     │
    └────────────────┘          │ (creator, role)          │
                                └──────────────────────────┘
    The group is committed before the creator's membership is inserted.
    If the second insert fails the group stays, the response carries a
    warning, and ensure_creator_membership() adds the missing row later.
    A group without its creator as a member is therefore a legal state.
"""

import logging
import uuid
from collections import defaultdict
from typing import Dict, Iterable, List

from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from stagelink.database import flush_or_conflict
from stagelink.exceptions import NotFoundError, PermissionDeniedError
from stagelink.models import Group, GroupJobApplication, GroupMember, Job, Profile
from stagelink.schemas.group import (
    GroupCreate,
    GroupCreateResponse,
    GroupMemberCreate,
    GroupMemberResponse,
    GroupResponse,
    GroupUpdate,
)
from stagelink.schemas.job import GroupJobApplicationResponse
from stagelink.services.authorization import Action, Entity, authorize, is_group_member
from stagelink.services.validation import clean_update, optional_text, require_text

logger = logging.getLogger(__name__)

DEFAULT_CREATOR_ROLE = "Creator"

MEMBERSHIP_WARNING = (
    "Group created, but adding you as a member failed. "
    "Retry with ensure-creator-membership."
)


class GroupService:
    """
    Responsibilities:
        - create_group(): two-step creation with warning on partial failure
        - ensure_creator_membership(): idempotent repair of step two
        - list_my_groups(), get_group(): groups with their members
        - update_group(), delete_group(): creator only
        - add_member(), remove_member(): creator adds; creator or member removes
        - list_group_applications(): the group's job applications (members only)
    """

    async def create_group(
        self,
        db: AsyncSession,
        requester: Profile,
        payload: GroupCreate,
    ) -> GroupCreateResponse:
        """
        Create a group and add the creator as its first member.

        Raises:
            ValidationError:       Blank name
            PermissionDeniedError: Requester is not an artist profile
        """
        group = Group(
            name=require_text(payload.name, "name"),
            description=optional_text(payload.description),
            genre=optional_text(payload.genre),
            created_by=requester.id,
        )
        await authorize(db, requester, Entity.GROUP, Action.CREATE, group)

        # ── Step 1: the group itself, committed on its own ────────────────
        db.add(group)
        await db.flush()
        await db.commit()
        logger.info("Group %s '%s' created by %s", group.id, group.name, requester.id)

        # Built before step 2: a rollback there expires every loaded instance
        snapshot = GroupResponse.model_validate(group)
        role = requester.role or DEFAULT_CREATOR_ROLE

        # ── Step 2: creator membership ────────────────────────────────────
        try:
            member = await self._insert_membership(db, group.id, requester.id, role)
        except SQLAlchemyError as exc:
            await db.rollback()
            logger.warning(
                "Group %s created without its creator as member: %s",
                snapshot.id,
                exc,
            )
            return GroupCreateResponse(group=snapshot, warning=MEMBERSHIP_WARNING)

        member_response = GroupMemberResponse.model_validate(member).model_copy(
            update={"display_name": requester.display_name}
        )
        return GroupCreateResponse(
            group=snapshot.model_copy(update={"members": [member_response]}),
        )

    async def ensure_creator_membership(
        self,
        db: AsyncSession,
        requester: Profile,
        group_id: uuid.UUID,
    ) -> GroupResponse:
        """Add the creator as a member if that row is missing. Safe to call repeatedly."""
        group = await self._get_group(db, group_id)
        await authorize(db, requester, Entity.GROUP, Action.UPDATE, group)

        if not await is_group_member(db, group.id, requester.id):
            await self._insert_membership(
                db, group.id, requester.id, requester.role or DEFAULT_CREATOR_ROLE
            )
            logger.info("Repaired creator membership for group %s", group.id)

        return await self.get_group(db, group.id)

    async def list_my_groups(self, db: AsyncSession, requester: Profile) -> List[GroupResponse]:
        """Groups the requester created or belongs to, each listed once, newest first."""
        member_of = select(GroupMember.group_id).where(GroupMember.profile_id == requester.id)
        result = await db.execute(
            select(Group)
            .where(or_(Group.created_by == requester.id, Group.id.in_(member_of)))
            .order_by(Group.created_at.desc())
        )
        groups = list(result.scalars().all())
        members = await self._members_by_group(db, [g.id for g in groups])
        return [self._group_response(g, members.get(g.id, [])) for g in groups]

    async def get_group(self, db: AsyncSession, group_id: uuid.UUID) -> GroupResponse:
        group = await self._get_group(db, group_id)
        members = await self._members_by_group(db, [group.id])
        return self._group_response(group, members.get(group.id, []))

    async def update_group(
        self,
        db: AsyncSession,
        requester: Profile,
        group_id: uuid.UUID,
        payload: GroupUpdate,
    ) -> GroupResponse:
        group = await self._get_group(db, group_id)
        await authorize(db, requester, Entity.GROUP, Action.UPDATE, group)

        changes = clean_update(
            payload.model_dump(exclude_unset=True),
            required=("name",),
            text_fields=("description", "genre"),
        )
        for key, value in changes.items():
            setattr(group, key, value)
        await db.flush()
        await db.refresh(group)
        return await self.get_group(db, group.id)

    async def delete_group(self, db: AsyncSession, requester: Profile, group_id: uuid.UUID) -> None:
        group = await self._get_group(db, group_id)
        await authorize(db, requester, Entity.GROUP, Action.DELETE, group)

        await db.delete(group)
        await db.flush()
        logger.info("Group %s deleted by %s", group_id, requester.id)

    async def add_member(
        self,
        db: AsyncSession,
        requester: Profile,
        group_id: uuid.UUID,
        payload: GroupMemberCreate,
    ) -> GroupMemberResponse:
        """
        Raises:
            NotFoundError:         Group or profile does not exist
            PermissionDeniedError: Requester did not create the group
            ConflictError:         Profile is already a member
        """
        group = await self._get_group(db, group_id)
        profile = await db.get(Profile, payload.profile_id)
        if profile is None:
            raise NotFoundError(resource="profile", resource_id=str(payload.profile_id))

        member = GroupMember(
            group_id=group.id,
            profile_id=profile.id,
            role=require_text(payload.role, "role"),
        )
        await authorize(db, requester, Entity.GROUP_MEMBER, Action.CREATE, member)

        display_name = profile.display_name
        db.add(member)
        await flush_or_conflict(
            db,
            message="This profile is already a member of the group",
            constraint="uq_group_members_group_user",
        )
        logger.info("Profile %s joined group %s as %s", member.profile_id, group_id, member.role)
        return GroupMemberResponse.model_validate(member).model_copy(
            update={"display_name": display_name}
        )

    async def remove_member(
        self,
        db: AsyncSession,
        requester: Profile,
        group_id: uuid.UUID,
        profile_id: uuid.UUID,
    ) -> None:
        """Creator removes anyone; any member may remove themself (leave)."""
        member = await db.scalar(
            select(GroupMember).where(
                GroupMember.group_id == group_id,
                GroupMember.profile_id == profile_id,
            )
        )
        if member is None:
            raise NotFoundError(resource="group member", resource_id=str(profile_id))
        await authorize(db, requester, Entity.GROUP_MEMBER, Action.DELETE, member)

        await db.delete(member)
        await db.flush()
        logger.info("Profile %s removed from group %s by %s", profile_id, group_id, requester.id)

    async def list_group_applications(
        self,
        db: AsyncSession,
        requester: Profile,
        group_id: uuid.UUID,
    ) -> List[GroupJobApplicationResponse]:
        group = await self._get_group(db, group_id)
        if not await is_group_member(db, group.id, requester.id):
            raise PermissionDeniedError(
                message="Only group members can view the group's applications",
                context={"group_id": str(group.id)},
            )

        result = await db.execute(
            select(GroupJobApplication, Job.title)
            .join(Job, Job.id == GroupJobApplication.job_id)
            .where(GroupJobApplication.group_id == group.id)
            .order_by(GroupJobApplication.created_at.desc())
        )
        applications = []
        for application, job_title in result.all():
            await authorize(db, requester, Entity.GROUP_JOB_APPLICATION, Action.READ, application)
            applications.append(
                GroupJobApplicationResponse.model_validate(application).model_copy(
                    update={"group_name": group.name, "job_title": job_title}
                )
            )
        return applications

    # ── Helpers ───────────────────────────────────────────────────────────

    @staticmethod
    async def _insert_membership(
        db: AsyncSession,
        group_id: uuid.UUID,
        profile_id: uuid.UUID,
        role: str,
    ) -> GroupMember:
        member = GroupMember(group_id=group_id, profile_id=profile_id, role=role)
        db.add(member)
        await db.flush()
        return member

    @staticmethod
    async def _get_group(db: AsyncSession, group_id: uuid.UUID) -> Group:
        group = await db.get(Group, group_id)
        if group is None:
            raise NotFoundError(resource="group", resource_id=str(group_id))
        return group

    @staticmethod
    async def _members_by_group(
        db: AsyncSession,
        group_ids: Iterable[uuid.UUID],
    ) -> Dict[uuid.UUID, List[GroupMemberResponse]]:
        group_ids = list(group_ids)
        members: Dict[uuid.UUID, List[GroupMemberResponse]] = defaultdict(list)
        if not group_ids:
            return members

        result = await db.execute(
            select(GroupMember, Profile.display_name)
            .join(Profile, Profile.id == GroupMember.profile_id)
            .where(GroupMember.group_id.in_(group_ids))
            .order_by(GroupMember.joined_at.asc())
        )
        for member, display_name in result.all():
            members[member.group_id].append(
                GroupMemberResponse.model_validate(member).model_copy(
                    update={"display_name": display_name}
                )
            )
        return members

    @staticmethod
    def _group_response(group: Group, members: List[GroupMemberResponse]) -> GroupResponse:
        return GroupResponse.model_validate(group).model_copy(update={"members": members})


group_service = GroupService()
