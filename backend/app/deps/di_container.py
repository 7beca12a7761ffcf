"""
Dependency injection container using dependency-injector.
Wires settings into the notification dispatcher, its HTTP client, the webhook
secret and the health service.

The container is built once in the application lifespan and kept on
app.state; request handlers reach it through the FastAPI dependencies below.
"""

from dependency_injector import containers, providers
from fastapi import Depends, Request

from app.core.config import Settings
from app.core.integrations.http.http_client import HttpClient
from app.core.security import WebhookSecret
from app.services.health_service import HealthService
from app.services.notification_dispatcher import DispatcherConfig, NotificationDispatcher


class Container(containers.DeclarativeContainer):
    """Dependency injection container."""

    # Configuration
    settings = providers.Dependency(instance_of=Settings)

    dispatcher_config = providers.Singleton(
        DispatcherConfig.from_settings,
        settings,
    )

    webhook_secret = providers.Singleton(
        WebhookSecret,
        secret=settings.provided.WEBHOOK_SECRET,
    )

    # Integrations
    http_client = providers.Singleton(
        HttpClient,
        timeout=settings.provided.NOTIFY_TIMEOUT_SECONDS,
    )

    # Services
    notification_dispatcher = providers.Singleton(
        NotificationDispatcher,
        config=dispatcher_config,
        http_client=http_client,
    )

    health_service = providers.Singleton(
        HealthService,
        version=settings.provided.VERSION,
    )


def build_container(app_settings: Settings) -> Container:
    """Create a container bound to the given settings."""
    return Container(settings=providers.Object(app_settings))


def get_container(request: Request) -> Container:
    """Get the application's dependency injection container."""
    return request.app.state.container


def get_settings(container: Container = Depends(get_container)) -> Settings:
    return container.settings()


def get_notification_dispatcher(container: Container = Depends(get_container)) -> NotificationDispatcher:
    return container.notification_dispatcher()


def get_webhook_secret(container: Container = Depends(get_container)) -> WebhookSecret:
    return container.webhook_secret()


def get_health_service(container: Container = Depends(get_container)) -> HealthService:
    return container.health_service()
