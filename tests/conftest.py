import pytest

from factories import REPORT_DAY
from modules.core.timestamps import local_day_bounds
from modules.orders.repositories.django_repository import OrderDjangoRepository


@pytest.fixture(autouse=True)
def _use_db(transactional_db):
    """Automatically use the test database for all tests.

    The async ORM runs queries on a worker thread, so data must be
    committed to be visible there: every test gets a transactional database.
    """


@pytest.fixture()
def repo():
    return OrderDjangoRepository()


@pytest.fixture()
def report_day():
    """A fixed local calendar day and its inclusive epoch-ms bounds."""
    start, end = local_day_bounds(REPORT_DAY)
    return REPORT_DAY, start, end
