"""Team member domain entity."""
from dataclasses import dataclass
from typing import Iterable, List, Optional

from cms_gateway.domain.entities.product import Image
from cms_gateway.domain.value_objects.locale import LocalizedContent


@dataclass(frozen=True)
class TeamMember:
    """Team member shown on the about and team pages."""

    id: str
    name: LocalizedContent
    role: LocalizedContent
    bio: LocalizedContent
    photo: Optional[Image] = None
    is_ceo: bool = False
    order: int = 0
    email: Optional[str] = None
    linkedin: Optional[str] = None


def sort_team_members(members: Iterable[TeamMember]) -> List[TeamMember]:
    """Sort members for display: CEO first, then by ``order``."""
    return sorted(members, key=lambda member: (not member.is_ceo, member.order))


def get_ceo(members: Iterable[TeamMember]) -> Optional[TeamMember]:
    return next((member for member in members if member.is_ceo), None)
