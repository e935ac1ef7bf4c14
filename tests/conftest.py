"""
Templar Test Configuration and Fixtures
"""
import pytest

from templar.config import LayoutConfig, LoggingConfig, TemplarConfig, TemplatingConfig
from templar.storage import InMemoryTemplateStorage
from templar.templating.service import TemplateRenderingService


def make_config(**templating) -> TemplarConfig:
    """Test configuration with templates under /app/templates."""
    options = {'dir': 'templates', 'cache_size': 10, 'statically_compile': False, 'single_flight': False}
    options.update(templating)
    return TemplarConfig(
        debug=True,
        layout=LayoutConfig(base_dir='/app'),
        templating=TemplatingConfig(**options),
        logging=LoggingConfig(level='DEBUG', file=None),
    )


@pytest.fixture
def config():
    """Test configuration."""
    return make_config()


@pytest.fixture
def storage():
    """In-memory template storage."""
    return InMemoryTemplateStorage()


@pytest.fixture
def service(config, storage):
    """Rendering service backed by in-memory storage."""
    return TemplateRenderingService(config, storage=storage)


@pytest.fixture
def add_template(service, storage):
    """Store a template source under the service's templates directory."""
    def add(name, source):
        storage.add(service.template_path(name), source)
        return service.template_path(name)
    return add


@pytest.fixture
def service_factory(storage):
    """Build services with custom templating options over the shared storage."""
    def factory(**templating):
        return TemplateRenderingService(make_config(**templating), storage=storage)
    return factory


# Custom markers
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "slow: Slow running tests")
