from __future__ import annotations

from enum import Enum


class FamilyTreeError(Exception):
    """Base exception for family tree failures."""


class ValidationReason(str, Enum):
    EMPTY_NAME = "emptyName"
    SELF_RELATION = "selfRelation"
    NO_TARGET_SELECTED = "noTargetSelected"
    UNKNOWN_SOURCE = "unknownSource"
    UNKNOWN_TARGET = "unknownTarget"


_DEFAULT_MESSAGES = {
    ValidationReason.EMPTY_NAME: "Enter a name to create the new member.",
    ValidationReason.SELF_RELATION: "Cannot relate a member to itself.",
    ValidationReason.NO_TARGET_SELECTED: "Pick an existing member or create a new one.",
    ValidationReason.UNKNOWN_SOURCE: "Source member does not exist.",
    ValidationReason.UNKNOWN_TARGET: "Target member does not exist.",
}


class ValidationError(FamilyTreeError):
    """Raised when a relation edit request is structurally invalid.

    No mutation has been applied when this is raised.
    """

    def __init__(self, reason: ValidationReason, message: str | None = None):
        self.reason = reason
        super().__init__(message or _DEFAULT_MESSAGES[reason])


class FormatError(FamilyTreeError):
    """Raised when an import payload is not a recognizable family tree export."""
