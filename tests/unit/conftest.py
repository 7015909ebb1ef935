"""Unit test configuration - bundled vocabularies and scenario records"""

import pytest

from alexandria_core.config import Settings, load_engine_config, set_engine_config


@pytest.fixture(scope="session")
def engine_config():
    """EngineConfig built from the bundled keyword and synonym files."""
    return load_engine_config(Settings())


@pytest.fixture(autouse=True)
def shared_engine_config(engine_config):
    """
    Install the bundled config as the shared instance for every test.
    
    Functions called without an explicit config resolve to it; the cache
    is dropped afterwards so no test sees another test's override.
    """
    set_engine_config(engine_config)
    yield engine_config
    set_engine_config(None)


@pytest.fixture
def climate_record():
    return {
        "title": "Climate Change Research Archive",
        "description": "Comprehensive report on climate change findings.",
        "creator": "National Climate Agency",
        "collection": ["smithsonian"],
        "year": "2010",
        "downloads": 1000000,
    }


@pytest.fixture
def weather_record():
    return {"title": "Weather observations in the arctic", "downloads": 25}


@pytest.fixture
def explicit_record():
    return {"identifier": "tape-0042", "title": "xxx hardcore compilation", "downloads": 5000}
