import pytest

from eventmailer.config import DEFAULT_EVENTS
from eventmailer.models import Customer, Event


@pytest.fixture
def sample_events():
    return [Event(**e) for e in DEFAULT_EVENTS]


@pytest.fixture
def customer():
    return Customer(name="Mr. Fake", city="New York")
