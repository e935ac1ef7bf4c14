"""
Templar Configuration System

Dataclass configuration for the rendering service. Defaults are read from the
environment when a config object is created, so presets and tests can build
configs explicitly while deployments drive everything from variables.
"""

import codecs
import os
from dataclasses import dataclass, field
from typing import Optional

from templar.exceptions import ConfigurationError


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ('1', 'true', 'yes')


def _env_int(name: str, default: str) -> int:
    value = os.getenv(name, default)
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")


@dataclass
class LayoutConfig:
    """Application layout configuration"""
    base_dir: str = field(default_factory=lambda: os.getenv('TEMPLAR_BASE_DIR', '.'))


@dataclass
class TemplatingConfig:
    """Template compilation and caching configuration"""
    dir: str = field(default_factory=lambda: os.getenv('TEMPLAR_TEMPLATES_DIR', 'templates'))
    cache_size: int = field(default_factory=lambda: _env_int('TEMPLAR_CACHE_SIZE', '100'))
    statically_compile: bool = field(default_factory=lambda: _env_bool('TEMPLAR_STATIC_COMPILE', 'False'))

    # Jinja2 environment options
    auto_escape: bool = True
    strict_undefined: bool = True
    trim_blocks: bool = False
    lstrip_blocks: bool = False
    keep_trailing_newline: bool = False

    encoding: str = 'utf-8'
    max_render_depth: int = 32
    single_flight: bool = field(default_factory=lambda: _env_bool('TEMPLAR_SINGLE_FLIGHT', 'False'))


@dataclass
class LoggingConfig:
    """Logging configuration"""
    level: str = field(default_factory=lambda: os.getenv('LOG_LEVEL', 'INFO'))
    format: str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    file: Optional[str] = field(default_factory=lambda: os.getenv('LOG_FILE'))


@dataclass
class TemplarConfig:
    """Main configuration"""
    debug: bool = field(default_factory=lambda: _env_bool('DEBUG', 'False'))

    # Layout
    layout: LayoutConfig = field(default_factory=LayoutConfig)

    # Templating
    templating: TemplatingConfig = field(default_factory=TemplatingConfig)

    # Logging
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self):
        """Validate configuration after initialization"""
        templating = self.templating
        if templating.cache_size < 0:
            raise ConfigurationError(f"cache_size must be >= 0, got {templating.cache_size}")
        if templating.max_render_depth < 1:
            raise ConfigurationError(f"max_render_depth must be >= 1, got {templating.max_render_depth}")
        if not templating.dir:
            raise ConfigurationError("Templates directory must not be empty")
        try:
            codecs.lookup(templating.encoding)
        except LookupError:
            raise ConfigurationError(f"Unknown template encoding: {templating.encoding}")

    @property
    def template_dir(self) -> str:
        """Absolute directory template names are resolved against"""
        return os.path.abspath(os.path.join(self.layout.base_dir, self.templating.dir))


# Configuration presets for different environments
class ConfigPresets:
    """Configuration presets for different environments"""

    @staticmethod
    def development() -> TemplarConfig:
        """Development configuration"""
        return TemplarConfig(
            debug=True,
            templating=TemplatingConfig(cache_size=0, statically_compile=False),
            logging=LoggingConfig(level='DEBUG'),
        )

    @staticmethod
    def production() -> TemplarConfig:
        """Production configuration"""
        return TemplarConfig(
            debug=False,
            templating=TemplatingConfig(statically_compile=True),
            logging=LoggingConfig(level='WARNING'),
        )

    @staticmethod
    def testing() -> TemplarConfig:
        """Testing configuration"""
        return TemplarConfig(
            debug=True,
            layout=LayoutConfig(base_dir='.'),
            templating=TemplatingConfig(dir='templates', cache_size=10, statically_compile=False, single_flight=False),
            logging=LoggingConfig(level='ERROR', file=None),
        )


def get_config_from_environment() -> TemplarConfig:
    """Get configuration based on environment"""
    env = os.getenv('TEMPLAR_ENV', 'production').lower()

    if env == 'development':
        return ConfigPresets.development()
    elif env == 'testing':
        return ConfigPresets.testing()
    else:
        return ConfigPresets.production()


__all__ = [
    'TemplarConfig', 'LayoutConfig', 'TemplatingConfig', 'LoggingConfig',
    'ConfigPresets', 'get_config_from_environment'
]
