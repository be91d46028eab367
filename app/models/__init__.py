from .user import User
from .group import Group
from .group_member import GroupMember
from .leetcode_stats import LeetCodeStats

__all__ = [
    "User",
    "Group",
    "GroupMember",
    "LeetCodeStats",
]
