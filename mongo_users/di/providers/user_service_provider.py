import logging
from typing import TYPE_CHECKING, Callable, Dict

from ...application.services.repository_user_service import RepositoryUserService
from ...application.services.user_service import UserService
from ...core.config import get_settings
from ...domain.repositories.user_repository import UserRepository
from ...infrastructure.db.native_user_service import NativeUserService

if TYPE_CHECKING:
    from ..base_container import BaseContainer

logger = logging.getLogger(__name__)


def _native(container: "BaseContainer", default_page_size: int) -> UserService:
    return NativeUserService(
        user_collection=container.get("user_collection"),
        default_page_size=default_page_size,
    )


def _repository(container: "BaseContainer", default_page_size: int) -> UserService:
    return RepositoryUserService(
        user_repository=container.get(UserRepository),
        default_page_size=default_page_size,
    )


USER_SERVICE_IMPLEMENTATIONS: Dict[str, Callable[["BaseContainer", int], UserService]] = {
    NativeUserService.name: _native,
    RepositoryUserService.name: _repository,
}


class UserServiceProvider:
    """User service provider - picks the UserService implementation from configuration"""

    @staticmethod
    def register(container: "BaseContainer") -> None:
        """
        Register the configured UserService as a singleton.

        Raises:
            ValueError: if USER_SERVICE_IMPL names an unknown implementation
        """
        settings = get_settings()
        impl = settings.user_service_impl
        builder = USER_SERVICE_IMPLEMENTATIONS.get(impl)
        if builder is None:
            known = ", ".join(sorted(USER_SERVICE_IMPLEMENTATIONS))
            raise ValueError(f"Unknown USER_SERVICE_IMPL '{impl}' (expected one of: {known})")

        container.register_singleton(UserService, builder(container, settings.default_page_size))
        logger.info(f"Registered '{impl}' UserService")
