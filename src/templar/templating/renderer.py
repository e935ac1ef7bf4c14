"""
Template renderer.

Executes compiled templates against a model. Templates may render other
templates through the ``render`` helper placed in their context; every nested
name goes through the same cache check, fetch, compile and cache sequence as
a top level request, using the compiler and cache of the enclosing pipeline.
"""

import logging
import os
import time
from typing import Any, Dict, Mapping, Optional, Tuple

from markupsafe import Markup

from templar.exceptions import RenderError, StorageError, CompileError, TemplateError
from templar.storage import TemplateStorage
from templar.templating.cache import TemplateCache
from templar.templating.compiled import CompiledTemplate
from templar.templating.compiler import TemplateCompiler
from templar.templating.flight import SingleFlight
from templar.templating.metrics import RenderMetrics

logger = logging.getLogger("templar.renderer")

RENDER_HELPER = "render"


class Renderer:
    """Renders one top level request, including any nested templates."""

    def __init__(self, compiler: TemplateCompiler, storage: TemplateStorage, cache: TemplateCache,
                 template_dir: str, *, encoding: str = 'utf-8', encoding_errors: str = 'strict',
                 max_depth: int = 32, metrics: Optional[RenderMetrics] = None,
                 single_flight: Optional[SingleFlight] = None):
        self.compiler = compiler
        self.storage = storage
        self.cache = cache
        self.template_dir = template_dir
        self.encoding = encoding
        self.encoding_errors = encoding_errors
        self.max_depth = max_depth
        self.metrics = metrics or RenderMetrics()
        self.single_flight = single_flight

    def template_path(self, name: str) -> str:
        return os.path.join(self.template_dir, name)

    async def resolve(self, name: str) -> CompiledTemplate:
        """Return the compiled template for name, fetching and compiling it on a cache miss."""
        compiled = self.cache.get(name)
        if compiled is not None:
            self.metrics.record_hit()
            return compiled

        self.metrics.record_miss()
        if self.single_flight is not None:
            return await self.single_flight.do(name, lambda: self._load(name))
        return await self._load(name)

    async def _load(self, name: str) -> CompiledTemplate:
        path = self.template_path(name)
        logger.debug(f"Fetching {name} from {path}")
        self.metrics.record_fetch()
        source = await self.storage.read_bytes(path)

        compiled = self.compiler.compile(source, name)
        self.metrics.record_compile()
        self.cache.put(name, compiled)
        return compiled

    async def render(self, compiled: CompiledTemplate, model: Optional[Mapping[str, Any]] = None) -> bytes:
        """Render a compiled template to output bytes."""
        start = time.perf_counter()
        output = await self._execute(compiled, model or {}, (compiled.name,))
        self.metrics.record_render(time.perf_counter() - start)
        try:
            return output.encode(self.encoding, self.encoding_errors)
        except UnicodeEncodeError as e:
            raise RenderError(f"Output cannot be encoded as {self.encoding}: {e.reason}",
                              template_name=compiled.name) from e

    async def _execute(self, compiled: CompiledTemplate, model: Mapping[str, Any],
                       chain: Tuple[str, ...]) -> str:
        context: Dict[str, Any] = dict(model)
        context[RENDER_HELPER] = self._nested_renderer(model, chain)

        try:
            template = self.compiler.materialize(compiled)
            return await template.render_async(context)
        except TemplateError:
            # already classified, e.g. a nested failure
            raise
        except Exception as e:
            raise RenderError(f"Error rendering template: {e}", template_name=compiled.name) from e

    def _nested_renderer(self, parent_model: Mapping[str, Any], chain: Tuple[str, ...]):
        async def render(name: str, model: Optional[Mapping[str, Any]] = None, **values) -> Markup:
            nested_chain = chain + (name,)
            if len(nested_chain) > self.max_depth:
                raise RenderError(
                    f"Maximum template nesting depth {self.max_depth} exceeded: {' -> '.join(nested_chain)}",
                    template_name=name
                )

            try:
                compiled = await self.resolve(name)
            except (StorageError, CompileError) as e:
                raise RenderError(f"Unable to resolve nested template '{name}' from '{chain[-1]}': {e}",
                                  template_name=name) from e

            nested_model = dict(parent_model if model is None else model)
            nested_model.update(values)
            return Markup(await self._execute(compiled, nested_model, nested_chain))

        return render
