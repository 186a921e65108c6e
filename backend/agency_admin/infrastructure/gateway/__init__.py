"""Data gateway adapters — hosted REST backend or self-hosted database."""

from .rest_gateway import RestAuthProvider, RestDataGateway
from .sqlalchemy_gateway import SQLAlchemyDataGateway
from .local_functions import LOCAL_FUNCTIONS
from .factory import GatewayFactory

__all__ = [
    "RestAuthProvider",
    "RestDataGateway",
    "SQLAlchemyDataGateway",
    "LOCAL_FUNCTIONS",
    "GatewayFactory",
]
