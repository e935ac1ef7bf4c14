"""
Template rendering service.

Public entry points for rendering named file templates and the built-in error
page. A request flows through

    Requested -> (CacheHit | Fetching) -> Compiling? -> Rendering -> Completed

with fetching and compiling skipped on a cache hit. Each request completes
exactly once: the coroutine API returns bytes or raises, and the callback API
delivers a single RenderResult.
"""

import asyncio
import logging
import os
from importlib import resources
from typing import Any, Callable, Mapping, Optional

from templar.config import TemplarConfig
from templar.exceptions import StorageError, TemplateError
from templar.storage import LocalTemplateStorage, TemplateStorage
from templar.templating.cache import TemplateCache
from templar.templating.compiled import CompiledTemplate
from templar.templating.compiler import TemplateCompiler
from templar.templating.flight import SingleFlight
from templar.templating.metrics import RenderMetrics
from templar.templating.renderer import Renderer
from templar.templating.result import RenderResult

ERROR_PAGE_RESOURCE = "error.html"
ERROR_PAGE_NAME = "errorpage"
ERROR_PAGE_ENCODING_ERRORS = "xmlcharrefreplace"

RenderCallback = Callable[[RenderResult], Any]


def load_resource_text(resource_name: str) -> str:
    """Read a template bundled with the package"""
    return resources.files("templar.templating").joinpath("resources").joinpath(resource_name).read_text(encoding="utf-8")


class TemplateRenderingService:
    """Renders file templates through a shared compiled-template cache."""

    def __init__(self, config: Optional[TemplarConfig] = None, *,
                 storage: Optional[TemplateStorage] = None,
                 cache: Optional[TemplateCache] = None,
                 error_page_source: Optional[str] = None):
        self.config = config or TemplarConfig()
        self.templating = self.config.templating
        self.template_dir = self.config.template_dir
        self.storage = storage if storage is not None else LocalTemplateStorage()
        self._cache = cache if cache is not None else TemplateCache(self.templating.cache_size)
        self._metrics = RenderMetrics()
        self._single_flight = SingleFlight() if self.templating.single_flight else None
        self.error_page_source = error_page_source if error_page_source is not None \
            else load_resource_text(ERROR_PAGE_RESOURCE)
        self.logger = logging.getLogger("templar.service")

        self.logger.debug(
            f"Template service ready: dir={self.template_dir} cache_size={self._cache.maximum_size} "
            f"static={self.templating.statically_compile} single_flight={self._single_flight is not None}"
        )

    @property
    def cache(self) -> TemplateCache:
        return self._cache

    @property
    def metrics(self) -> RenderMetrics:
        return self._metrics

    def template_path(self, name: str) -> str:
        return os.path.join(self.template_dir, name)

    async def render_file_template(self, name: str, model: Optional[Mapping[str, Any]] = None) -> bytes:
        """Render the named template from the templates directory.

        Storage and compile failures are raised unchanged and leave the cache
        untouched; a later call for the same name fetches again.
        """
        renderer = self._create_renderer(self._create_compiler())
        try:
            compiled = await renderer.resolve(name)
            return await self._render(renderer, compiled, model)
        except StorageError as e:
            self._metrics.record_failure(e)
            self.logger.warning(f"Unable to load template {name}: {e}")
            raise
        except TemplateError as e:
            self._metrics.record_failure(e)
            self.logger.error(f"Failed to render template {name}: {e}")
            raise

    async def render_error(self, model: Optional[Mapping[str, Any]] = None) -> bytes:
        """Render the built-in error page.

        The page is compiled fresh on every call and never cached, so it does
        not depend on storage. Characters the output encoding cannot represent
        are written as HTML character references. Any failure here is final
        for the request.
        """
        try:
            compiler = self._create_compiler()
            compiled = compiler.compile(self.error_page_source, ERROR_PAGE_NAME)
            renderer = self._create_renderer(compiler, encoding_errors=ERROR_PAGE_ENCODING_ERRORS)
            return await self._render(renderer, compiled, model)
        except TemplateError as e:
            self._metrics.record_failure(e)
            self.logger.error(f"Failed to render error page: {e}")
            raise

    def submit_file_template(self, name: str, model: Optional[Mapping[str, Any]],
                             callback: RenderCallback) -> asyncio.Task:
        """Schedule render_file_template and deliver its RenderResult to callback."""
        return self._submit(self.render_file_template(name, model), callback)

    def submit_error(self, model: Optional[Mapping[str, Any]], callback: RenderCallback) -> asyncio.Task:
        """Schedule render_error and deliver its RenderResult to callback."""
        return self._submit(self.render_error(model), callback)

    def invalidate(self, name: str) -> bool:
        """Drop a compiled template so the next render fetches it again"""
        return self._cache.invalidate(name)

    def clear_cache(self):
        self._cache.clear()

    def _submit(self, coro, callback: RenderCallback) -> asyncio.Task:
        task = asyncio.ensure_future(coro)

        def _deliver(done: asyncio.Task):
            if done.cancelled():
                result = RenderResult.failure(asyncio.CancelledError())
            elif done.exception() is not None:
                result = RenderResult.failure(done.exception())
            else:
                result = RenderResult.success(done.result())
            callback(result)

        task.add_done_callback(_deliver)
        return task

    async def _render(self, renderer: Renderer, compiled: CompiledTemplate,
                      model: Optional[Mapping[str, Any]]) -> bytes:
        self.logger.debug(f"Rendering {compiled.name}")
        return await renderer.render(compiled, model)

    def _create_compiler(self) -> TemplateCompiler:
        return TemplateCompiler.from_config(self.templating)

    def _create_renderer(self, compiler: TemplateCompiler, encoding_errors: str = 'strict') -> Renderer:
        return Renderer(
            compiler, self.storage, self._cache, self.template_dir,
            encoding=self.templating.encoding,
            encoding_errors=encoding_errors,
            max_depth=self.templating.max_render_depth,
            metrics=self._metrics,
            single_flight=self._single_flight,
        )
