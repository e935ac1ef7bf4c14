"""
Unit tests for the template compiler
"""
import dataclasses

import jinja2
import pytest

from templar.config import TemplatingConfig
from templar.exceptions import CompileError
from templar.templating.compiled import CompiledTemplate
from templar.templating.compiler import TemplateCompiler


@pytest.fixture(params=[True, False], ids=["static", "dynamic"])
def compiler(request):
    return TemplateCompiler(statically_compile=request.param)


class TestCompile:
    """Test compiling template sources"""

    def test_compile_returns_compiled_template(self, compiler):
        compiled = compiler.compile(b"Hi {{ name }}", "hello.tpl")

        assert isinstance(compiled, CompiledTemplate)
        assert compiled.name == "hello.tpl"
        assert compiled.source == "Hi {{ name }}"
        assert compiled.static == compiler.statically_compile

    def test_static_mode_compiles_ahead(self):
        compiled = TemplateCompiler(statically_compile=True).compile(b"Hi {{ name }}", "hello.tpl")
        assert compiled.is_executable
        assert isinstance(compiled.template, jinja2.Template)

    def test_dynamic_mode_defers_code_generation(self):
        compiled = TemplateCompiler(statically_compile=False).compile(b"Hi {{ name }}", "hello.tpl")
        assert not compiled.is_executable
        assert compiled.template is None

    def test_accepts_text_source(self, compiler):
        compiled = compiler.compile("Hi {{ name }}", "hello.tpl")
        assert compiled.source == "Hi {{ name }}"

    def test_decodes_with_configured_encoding(self):
        compiler = TemplateCompiler(encoding="latin-1")
        compiled = compiler.compile("Café".encode("latin-1"), "cafe.tpl")
        assert compiled.source == "Café"

    def test_compiled_template_is_immutable(self, compiler):
        compiled = compiler.compile(b"Hi", "hello.tpl")
        with pytest.raises(dataclasses.FrozenInstanceError):
            compiled.name = "other.tpl"


class TestCompileErrors:
    """Test compile failures"""

    def test_syntax_error(self, compiler):
        with pytest.raises(CompileError) as exc_info:
            compiler.compile(b"Hi {{ name", "bad.tpl")

        error = exc_info.value
        assert error.template_name == "bad.tpl"
        assert error.line_number == 1
        assert "bad.tpl:1" in str(error)
        assert isinstance(error.__cause__, jinja2.TemplateSyntaxError)

    def test_unclosed_block_reports_line(self, compiler):
        source = b"line one\n{% if user %}\nhello\n"
        with pytest.raises(CompileError) as exc_info:
            compiler.compile(source, "unclosed.tpl")
        assert exc_info.value.line_number is not None

    def test_invalid_encoding(self, compiler):
        with pytest.raises(CompileError) as exc_info:
            compiler.compile(b"\xff\xfe\xfa", "binary.tpl")
        assert exc_info.value.template_name == "binary.tpl"

    def test_unknown_filter_fails_static_compile(self):
        with pytest.raises(CompileError):
            TemplateCompiler(statically_compile=True).compile(b"{{ name | nosuchfilter }}", "filter.tpl")

    def test_unknown_filter_passes_dynamic_compile(self):
        compiled = TemplateCompiler(statically_compile=False).compile(b"{{ name | nosuchfilter }}", "filter.tpl")
        assert compiled.template is None


class TestMaterialize:
    """Test turning compiled templates into executable ones"""

    @pytest.mark.asyncio
    async def test_materialize_renders(self, compiler):
        compiled = compiler.compile(b"Hi {{ name }}", "hello.tpl")
        template = compiler.materialize(compiled)
        assert await template.render_async(name="World") == "Hi World"

    def test_static_materialize_reuses_template(self):
        compiler = TemplateCompiler(statically_compile=True)
        compiled = compiler.compile(b"Hi", "hello.tpl")
        assert compiler.materialize(compiled) is compiled.template

    def test_dynamic_materialize_generates_fresh_template(self):
        compiler = TemplateCompiler(statically_compile=False)
        compiled = compiler.compile(b"Hi", "hello.tpl")
        assert compiler.materialize(compiled) is not compiler.materialize(compiled)

    def test_materialize_with_another_compiler(self):
        compiled = TemplateCompiler(statically_compile=False).compile(b"Hi", "hello.tpl")
        other = TemplateCompiler(statically_compile=False)
        assert other.materialize(compiled).environment is other.environment


def test_from_config():
    config = TemplatingConfig(statically_compile=True, auto_escape=False, strict_undefined=False,
                              trim_blocks=True, encoding="latin-1")
    compiler = TemplateCompiler.from_config(config)

    assert compiler.statically_compile is True
    assert compiler.encoding == "latin-1"
    assert compiler.environment.autoescape is False
    assert compiler.environment.trim_blocks is True
    assert compiler.environment.undefined is jinja2.Undefined
    assert compiler.environment.is_async


def test_compilers_do_not_share_environments():
    assert TemplateCompiler().environment is not TemplateCompiler().environment
