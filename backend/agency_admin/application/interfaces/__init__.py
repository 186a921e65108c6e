from .data_gateway import DataGateway, Row
from .auth_provider import AuthProvider
from .notifier import Notifier

__all__ = [
    "DataGateway",
    "Row",
    "AuthProvider",
    "Notifier",
]
