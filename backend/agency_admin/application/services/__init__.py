from .entity_store import EntityStore, StoreState
from .user_store import UserStore
from .blog_post_store import BlogPostStore
from .category_store import CategoryStore
from .seo_page_store import SeoPageStore
from .contact_submission_store import ContactSubmissionStore
from .filtering import FilterPredicate, visible_subset
from .selection_controller import SelectionController, SelectAllState
from .bulk_action_executor import BulkAction, BulkActionExecutor
from .auth_service import AuthService
from .contact_service import ContactService
from .dashboard_stats_service import DashboardStats, DashboardStatsService
from .notification_queue import NotificationQueue
from .admin_workspace import AdminWorkspace, CollectionView
from .workspace_registry import WorkspaceRegistry

__all__ = [
    "EntityStore",
    "StoreState",
    "UserStore",
    "BlogPostStore",
    "CategoryStore",
    "SeoPageStore",
    "ContactSubmissionStore",
    "FilterPredicate",
    "visible_subset",
    "SelectionController",
    "SelectAllState",
    "BulkAction",
    "BulkActionExecutor",
    "AuthService",
    "ContactService",
    "DashboardStats",
    "DashboardStatsService",
    "NotificationQueue",
    "AdminWorkspace",
    "CollectionView",
    "WorkspaceRegistry",
]
