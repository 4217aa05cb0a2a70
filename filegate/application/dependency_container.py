"""
Dependency Injection Container

Holds the service instances built at startup so API handlers and Celery
tasks can look them up by type through ``current_app.container``.
"""

import logging
import threading
from typing import Any, Dict, Iterable, List, Type, TypeVar

from filegate.domain.events import DomainEvent

logger = logging.getLogger(__name__)

T = TypeVar('T')


class DependencyNotFoundError(Exception):
    """Raised when a service type was never registered."""
    pass


class DependencyContainer:
    """
    Registry of shared service instances keyed by type.

    An override shadows the registered instance, so a test can swap one
    service of a running app without rebuilding the rest.
    """

    def __init__(self):
        self._services: Dict[Type, Any] = {}
        self._overrides: Dict[Type, Any] = {}
        self._lock = threading.Lock()

    def register_singleton(self, interface: Type[T], implementation: T) -> None:
        """Register the instance every resolve() of ``interface`` returns."""
        with self._lock:
            self._services[interface] = implementation
        logger.debug(f"Registered {interface.__name__}: {type(implementation).__name__}")

    def resolve(self, interface: Type[T]) -> T:
        """
        Look up the service registered for a type.

        Raises:
            DependencyNotFoundError: If nothing is registered for ``interface``
        """
        with self._lock:
            if interface in self._overrides:
                return self._overrides[interface]
            try:
                return self._services[interface]
            except KeyError:
                raise DependencyNotFoundError(
                    f"No registration found for type: {interface.__name__}"
                ) from None

    def override(self, interface: Type[T], implementation: T) -> None:
        with self._lock:
            self._overrides[interface] = implementation
        logger.debug(f"Overridden {interface.__name__}")

    def registered(self) -> List[str]:
        """Names of the registered service types, for startup logging."""
        with self._lock:
            return sorted(interface.__name__ for interface in self._services)

    def setup_event_handlers(self, event_publisher, handlers: Iterable[Any]) -> None:
        """
        Subscribe each handler's ``handle(event)`` to every domain event.

        A handler that fails to subscribe is logged and skipped; the audit
        trail and event log never keep the application from starting.
        """
        for handler in handlers:
            try:
                event_publisher.subscribe(DomainEvent, handler.handle)
                logger.debug(f"Registered event handler: {handler.__class__.__name__}")
            except Exception as e:
                logger.error(
                    f"Failed to register event handler {handler.__class__.__name__}: {e}"
                )
