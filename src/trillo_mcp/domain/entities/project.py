"""
Project Domain Entity (DTO) and field normalizers.

A project is the task container ("board") of a single owner.
"""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from trillo_mcp.domain.errors import InvalidProjectDescriptionError, InvalidProjectNameError

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 120
DESCRIPTION_MAX_LENGTH = 4000

_WHITESPACE_RUN = re.compile(r"\s+")


@dataclass
class ProjectDTO:
    """
    Project Data Transfer Object.

    Attributes:
        id: Unique project identifier (UUID), also used as board id
        owner_user_id: Identifier of the only user allowed to see the project
        name: Project name, unique per owner
        description: Optional project description, used as suggestion context
        sort_order: Position of the project in the owner's list
        created_at: Project creation timestamp
        updated_at: Last modification timestamp
    """

    id: str
    owner_user_id: str
    name: str
    description: Optional[str] = None
    sort_order: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert DTO to dictionary representation."""
        return {
            "id": self.id,
            "owner_user_id": self.owner_user_id,
            "name": self.name,
            "description": self.description,
            "sort_order": self.sort_order,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


def normalize_project_name(raw_name: Any) -> str:
    """Trim and collapse inner whitespace runs to a single space."""
    if not isinstance(raw_name, str):
        raise InvalidProjectNameError()

    name = _WHITESPACE_RUN.sub(" ", raw_name.strip())
    if not NAME_MIN_LENGTH <= len(name) <= NAME_MAX_LENGTH:
        raise InvalidProjectNameError()
    return name


def normalize_project_description(raw_description: Any) -> Optional[str]:
    if not isinstance(raw_description, str):
        return None

    description = raw_description.strip()
    if not description:
        return None
    if len(description) > DESCRIPTION_MAX_LENGTH:
        raise InvalidProjectDescriptionError()
    return description
