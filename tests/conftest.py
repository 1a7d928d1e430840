import json

import pytest

from tests.helpers import SAMPLE_PLAN


@pytest.fixture
def sample_plan_dict() -> dict:
    return json.loads(SAMPLE_PLAN.read_text(encoding="utf-8"))
