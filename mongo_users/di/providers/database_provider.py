from typing import TYPE_CHECKING
from ...utils.db import get_user_collection

if TYPE_CHECKING:
    from ..base_container import BaseContainer


class DatabaseProvider:
    """Centralized database connection provider - single source of truth for all DB connections"""

    @staticmethod
    def register(container: "BaseContainer") -> None:
        """
        Register the users collection in the container.
        This is the ONLY place where database connections are registered.
        """
        container.register_singleton("user_collection", get_user_collection())
