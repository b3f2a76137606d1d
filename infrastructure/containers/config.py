"""
配置容器（ConfigContainer）

提供全局 Settings 单例。
"""

from dependency_injector import containers, providers

from infrastructure.config.settings import Settings, get_settings


class ConfigContainer(containers.DeclarativeContainer):
    """配置容器"""

    settings: providers.Singleton[Settings] = providers.Singleton(get_settings)
