"""
Template compiler.

Turns raw template bytes into a CompiledTemplate using a private, async enabled
Jinja2 environment. The environment has no loader: nested templates are
resolved by the renderer through the cache and storage, never by Jinja2.
"""

import logging
import time
from typing import Union

import jinja2

from templar.exceptions import CompileError
from templar.templating.compiled import CompiledTemplate

logger = logging.getLogger("templar.compiler")


class AsyncStrictUndefined(jinja2.StrictUndefined):
    """StrictUndefined that also fails when looped over with ``async for``."""
    __slots__ = ()
    __aiter__ = jinja2.StrictUndefined._fail_with_undefined_error


class TemplateCompiler:
    """Compiles template sources in static or dynamic mode.

    Static mode generates and byte-compiles Python code up front, which costs
    more on first use and is faster on every render after that. Dynamic mode
    only parses the source to reject syntax errors, and generates code each
    time the template is executed.
    """

    def __init__(self, statically_compile: bool = False, *, auto_escape: bool = True,
                 strict_undefined: bool = True, trim_blocks: bool = False,
                 lstrip_blocks: bool = False, keep_trailing_newline: bool = False,
                 encoding: str = 'utf-8'):
        self.statically_compile = statically_compile
        self.encoding = encoding
        self.environment = jinja2.Environment(
            autoescape=auto_escape,
            undefined=AsyncStrictUndefined if strict_undefined else jinja2.Undefined,
            trim_blocks=trim_blocks,
            lstrip_blocks=lstrip_blocks,
            keep_trailing_newline=keep_trailing_newline,
            enable_async=True,
        )

    @classmethod
    def from_config(cls, config) -> 'TemplateCompiler':
        """Create a compiler from a TemplatingConfig"""
        return cls(
            config.statically_compile,
            auto_escape=config.auto_escape,
            strict_undefined=config.strict_undefined,
            trim_blocks=config.trim_blocks,
            lstrip_blocks=config.lstrip_blocks,
            keep_trailing_newline=config.keep_trailing_newline,
            encoding=config.encoding,
        )

    def compile(self, source: Union[bytes, str], template_name: str) -> CompiledTemplate:
        """Compile template source into a CompiledTemplate"""
        if isinstance(source, bytes):
            try:
                source = source.decode(self.encoding)
            except UnicodeDecodeError as e:
                raise CompileError(f"Template is not valid {self.encoding}: {e.reason}",
                                   template_name=template_name) from e

        start = time.perf_counter()
        try:
            if self.statically_compile:
                template = self._load(source, template_name)
            else:
                self.environment.parse(source, name=template_name)
                template = None
        except jinja2.TemplateSyntaxError as e:
            raise CompileError(f"Syntax error: {e.message}", template_name=template_name,
                               line_number=e.lineno) from e
        except Exception as e:
            raise CompileError(f"Code generation failed: {e}", template_name=template_name) from e

        logger.debug(f"Compiled {template_name} ({'static' if self.statically_compile else 'dynamic'}) "
                     f"in {(time.perf_counter() - start) * 1000:.2f}ms")
        return CompiledTemplate(name=template_name, source=source, static=self.statically_compile,
                                template=template)

    def materialize(self, compiled: CompiledTemplate) -> jinja2.Template:
        """Return the executable form of a compiled template"""
        if compiled.template is not None:
            return compiled.template
        # Dynamic templates are compiled against this compiler's environment
        return self._load(compiled.source, compiled.name)

    def _load(self, source: str, template_name: str) -> jinja2.Template:
        env = self.environment
        code = env.compile(source, name=template_name, filename=template_name)
        return env.template_class.from_code(env, code, env.make_globals(None))
