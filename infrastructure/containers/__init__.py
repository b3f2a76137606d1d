"""
依赖注入容器

用法：
    from infrastructure.containers import bootstrap

    boot = bootstrap()
    handler = boot.app.read_mailbox_handler()
    messages = handler.read_mailbox(boot.config.settings().mailbox_config())
"""

from dataclasses import dataclass

from common.logging import set_log_backend
from infrastructure.containers.application import AppContainer
from infrastructure.containers.config import ConfigContainer
from infrastructure.containers.infrastructure import InfraContainer


@dataclass
class Bootstrap:
    """已装配的容器集合"""

    config: ConfigContainer
    infra: InfraContainer
    app: AppContainer


def bootstrap() -> Bootstrap:
    """
    装配容器并按配置初始化日志后端

    Returns:
        Bootstrap 实例
    """
    config = ConfigContainer()
    infra = InfraContainer(config=config)
    app = AppContainer(config=config, infra=infra)

    settings = config.settings()
    set_log_backend(settings.log_backend, settings.log_level)

    return Bootstrap(config=config, infra=infra, app=app)


__all__ = [
    "AppContainer",
    "Bootstrap",
    "ConfigContainer",
    "InfraContainer",
    "bootstrap",
]
