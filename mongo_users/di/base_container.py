from typing import Any, Dict, Hashable


class BaseContainer:
    """
    Minimal service locator.

    Keys are either types (domain interfaces, services) or plain strings for
    infrastructure handles such as collections.
    """

    def __init__(self) -> None:
        self._singletons: Dict[Hashable, Any] = {}

    def register_singleton(self, key: Hashable, instance: Any) -> None:
        """Register an already-built instance under key"""
        self._singletons[key] = instance

    def get(self, key: Hashable) -> Any:
        """
        Resolve a dependency

        Raises:
            ValueError: if nothing is registered under key
        """
        if key in self._singletons:
            return self._singletons[key]
        name = key.__name__ if isinstance(key, type) else repr(key)
        raise ValueError(f"No dependency registered for {name}")
