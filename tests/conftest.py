import pytest

from lgate.directives import DirectiveProcessor

from tests.infrastructure import CollectingSink


@pytest.fixture
def sink() -> CollectingSink:
    return CollectingSink()


@pytest.fixture
def processor(sink: CollectingSink) -> DirectiveProcessor:
    """Процессор без обработчиков include и пользовательских директив."""
    return DirectiveProcessor(sink=sink)
