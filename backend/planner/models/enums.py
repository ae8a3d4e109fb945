"""Status, priority and role vocabularies shared by models and schemas."""

from enum import Enum


class AssignmentStatus(str, Enum):
    NOT_STARTED = "NotStarted"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"


class TaskStatus(str, Enum):
    NOT_STARTED = "NotStarted"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"


class Priority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


# Project member roles are free text; these are the conventional values.
ROLE_OWNER = "Owner"
ROLE_MEMBER = "Member"
ROLE_CONTRIBUTOR = "Contributor"
