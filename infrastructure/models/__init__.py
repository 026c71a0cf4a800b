"""Infrastructure models package exports."""
from .base import Base, metadata
from .member import MemberModel, MemberNicknameModel
from .community import (
    BookReviewModel,
    CommunityCommentModel,
    CommunityPostModel,
    ThreadEntryModel,
    ThreadModel,
)

__all__ = [
    "Base",
    "metadata",
    "MemberModel",
    "MemberNicknameModel",
    "CommunityPostModel",
    "CommunityCommentModel",
    "BookReviewModel",
    "ThreadModel",
    "ThreadEntryModel",
]
