from jobboard.models.job import JOB_TYPES, Job
from jobboard.models.user import ROLES, User

__all__ = ["JOB_TYPES", "Job", "ROLES", "User"]
