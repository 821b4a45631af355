"""pytest 共用 fixture"""

import pytest

from app.services.amap_service import AmapAPIError
from app.services.region_extractor import RegionExtractor
from app.services.scope_resolver import ScopeResolver
from tests.fakes import SleepRecorder


@pytest.fixture
def rule_extractor():
    return RegionExtractor(enable_ai=False)


@pytest.fixture
def scope_resolver(rule_extractor):
    return ScopeResolver(rule_extractor)


@pytest.fixture
def sleep_recorder():
    return SleepRecorder()


@pytest.fixture
def rate_limit_error():
    return AmapAPIError("CUQPS_HAS_EXCEEDED_THE_LIMIT", "10021")
