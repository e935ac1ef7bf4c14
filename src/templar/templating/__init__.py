"""
Compiled template cache and rendering.
"""

from templar.templating.cache import TemplateCache, CacheItem
from templar.templating.compiled import CompiledTemplate
from templar.templating.compiler import TemplateCompiler
from templar.templating.flight import SingleFlight
from templar.templating.metrics import RenderMetrics
from templar.templating.renderer import Renderer
from templar.templating.result import RenderResult
from templar.templating.service import TemplateRenderingService

__all__ = [
    'TemplateCache', 'CacheItem', 'CompiledTemplate', 'TemplateCompiler',
    'SingleFlight', 'RenderMetrics', 'Renderer', 'RenderResult',
    'TemplateRenderingService'
]
