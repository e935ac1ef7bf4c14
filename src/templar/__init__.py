"""
Templar - compiled template cache and render engine

Renders named templates to bytes, compiling each template on first use and
reusing the compiled form from a bounded cache afterwards. Template sources
are fetched without blocking, and templates may render nested templates
through the same cache.

Example:
    >>> from templar import TemplateRenderingService, TemplarConfig
    >>>
    >>> service = TemplateRenderingService(TemplarConfig())
    >>> output = await service.render_file_template('hello.html', {'name': 'World'})
"""

__version__ = "0.1.0"
__author__ = "Templar Team"

from templar.config import (
    TemplarConfig, LayoutConfig, TemplatingConfig, LoggingConfig,
    ConfigPresets, get_config_from_environment
)
from templar.exceptions import (
    TemplarError, ConfigurationError, TemplateError, StorageError,
    TemplateNotFoundError, CompileError, RenderError, error_model
)
from templar.storage import TemplateStorage, LocalTemplateStorage, InMemoryTemplateStorage
from templar.templating import (
    TemplateCache, CompiledTemplate, TemplateCompiler, Renderer,
    RenderResult, RenderMetrics, SingleFlight, TemplateRenderingService
)

__all__ = [
    'TemplarConfig', 'LayoutConfig', 'TemplatingConfig', 'LoggingConfig',
    'ConfigPresets', 'get_config_from_environment',
    'TemplarError', 'ConfigurationError', 'TemplateError', 'StorageError',
    'TemplateNotFoundError', 'CompileError', 'RenderError', 'error_model',
    'TemplateStorage', 'LocalTemplateStorage', 'InMemoryTemplateStorage',
    'TemplateCache', 'CompiledTemplate', 'TemplateCompiler', 'Renderer',
    'RenderResult', 'RenderMetrics', 'SingleFlight', 'TemplateRenderingService',
]
