from .user_profile import UserProfile, KNOWN_ROLES
from .blog_post import BlogPost, POST_STATUSES, slugify, reading_time_minutes
from .blog_category import BlogCategory, DEFAULT_CATEGORY_COLOR
from .seo_page import SeoPage
from .contact_submission import ContactSubmission
from .session import AuthUser, AuthSession, AuthSnapshot
from .results import (
    MutationResult,
    BulkFailure,
    BulkResult,
    BulkOutcome,
    Notification,
)

__all__ = [
    "UserProfile",
    "KNOWN_ROLES",
    "BlogPost",
    "POST_STATUSES",
    "slugify",
    "reading_time_minutes",
    "BlogCategory",
    "DEFAULT_CATEGORY_COLOR",
    "SeoPage",
    "ContactSubmission",
    "AuthUser",
    "AuthSession",
    "AuthSnapshot",
    "MutationResult",
    "BulkFailure",
    "BulkResult",
    "BulkOutcome",
    "Notification",
]
