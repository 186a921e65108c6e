from .profile import ProfileModel
from .blog import BlogPostModel, BlogCategoryModel, BlogPostCategoryModel
from .seo_metric import SeoMetricModel
from .contact import ContactSubmissionModel, NotificationModel

# Table name → ORM model, used by the SQLAlchemy gateway
TABLE_MODELS = {
    model.__tablename__: model
    for model in (
        ProfileModel,
        BlogPostModel,
        BlogCategoryModel,
        BlogPostCategoryModel,
        SeoMetricModel,
        ContactSubmissionModel,
        NotificationModel,
    )
}

__all__ = [
    "ProfileModel",
    "BlogPostModel",
    "BlogCategoryModel",
    "BlogPostCategoryModel",
    "SeoMetricModel",
    "ContactSubmissionModel",
    "NotificationModel",
    "TABLE_MODELS",
]
