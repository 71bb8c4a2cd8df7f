from src.ports.auth import AuthGatewayPort
from src.ports.clock import ClockPort
from src.ports.store import ContentStorePort

USERS_COLLECTION = "users"

__all__ = ["AuthGatewayPort", "ClockPort", "ContentStorePort", "USERS_COLLECTION"]
