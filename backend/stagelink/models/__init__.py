"""
ORM models. Importing this package registers every table on `Base.metadata`
(Alembic's env.py and the test fixtures rely on that).
"""

from stagelink.models.account import Account, RevokedSession
from stagelink.models.group import Group, GroupJobApplication, GroupMember
from stagelink.models.job import Job, JobApplication
from stagelink.models.media import MediaItem
from stagelink.models.message import Message
from stagelink.models.profile import Profile
from stagelink.models.venue import Venue

__all__ = [
    "Account",
    "RevokedSession",
    "Profile",
    "MediaItem",
    "Venue",
    "Job",
    "JobApplication",
    "Group",
    "GroupMember",
    "GroupJobApplication",
    "Message",
]
