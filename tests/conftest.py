import pytest
import structlog


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    # CLI tests point the logger at CliRunner's stream, which is closed afterwards
    structlog.reset_defaults()
