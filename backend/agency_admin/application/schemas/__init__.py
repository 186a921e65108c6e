from .user import UserProfileCreate, UserProfileUpdate, UserProfileResponse
from .blog_post import BlogPostCreate, BlogPostUpdate, BlogPostResponse
from .category import CategoryCreate, CategoryUpdate, CategoryResponse
from .seo_page import SeoPageCreate, SeoPageUpdate, SeoPageResponse
from .contact import (
    ContactSubmissionCreate,
    ContactSubmissionResponse,
    ContactSubmissionUpdate,
    ContactSubmissionAdminResponse,
)
from .admin import (
    CollectionViewResponse,
    BulkActionRequest,
    BulkFailureSchema,
    BulkOutcomeResponse,
    NotificationSchema,
    DashboardStatsResponse,
    SignInRequest,
    SessionResponse,
)

__all__ = [
    "UserProfileCreate",
    "UserProfileUpdate",
    "UserProfileResponse",
    "BlogPostCreate",
    "BlogPostUpdate",
    "BlogPostResponse",
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryResponse",
    "SeoPageCreate",
    "SeoPageUpdate",
    "SeoPageResponse",
    "ContactSubmissionCreate",
    "ContactSubmissionResponse",
    "ContactSubmissionUpdate",
    "ContactSubmissionAdminResponse",
    "CollectionViewResponse",
    "BulkActionRequest",
    "BulkFailureSchema",
    "BulkOutcomeResponse",
    "NotificationSchema",
    "DashboardStatsResponse",
    "SignInRequest",
    "SessionResponse",
]
