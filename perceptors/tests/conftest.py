import pytest
from django.core.cache import cache

from perceptors.services.hospitals import HospitalService
from perceptors.services.security import CallerContext

from .utils import make_admin, make_manager, seed_catalogs


@pytest.fixture(autouse=True)
def _clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def catalogs(db):
    seed_catalogs()


@pytest.fixture
def manager1(db):
    return make_manager('G001', 'manager1')


@pytest.fixture
def manager2(db):
    return make_manager('G002', 'manager2')


@pytest.fixture
def admin_user(db):
    return make_admin()


@pytest.fixture
def admin_caller():
    return CallerContext(user_id='admin1', is_admin=True)


@pytest.fixture
def caller1(manager1):
    return CallerContext(user_id='manager1', manager_code='G001')


@pytest.fixture
def caller2(manager2):
    return CallerContext(user_id='manager2', manager_code='G002')


@pytest.fixture
def service(catalogs):
    return HospitalService()
