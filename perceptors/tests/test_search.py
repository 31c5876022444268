import pytest

from perceptors.exceptions import ValidationFailed
from perceptors.models import Perceptor

from .utils import hospital_payload

pytestmark = pytest.mark.django_db


@pytest.fixture
def hospitals(service, caller1, caller2, admin_caller):
    created = [
        service.create(hospital_payload(name='St. Mary'), caller1).entity,
        service.create(hospital_payload(name='Mary Help', priority='2'), caller1).entity,
        service.create(hospital_payload(name='Levante', specialty='PEDI'), caller2).entity,
        service.create(hospital_payload(name='Unassigned'), admin_caller).entity,
    ]
    Perceptor.objects.create(category='C', code=1001, name='St. Mary clinic', priority='1', specialty='CARD')
    return created


def _codes(result):
    return [p.code for p in result.entities]


def test_search_is_forced_to_hospital_category(service, hospitals, caller1):
    result = service.search({'category': 'C', 'manager': None}, caller1)
    assert {p.category for p in result.entities} == {'H'}
    assert _codes(result) == [1001, 1002, 1003, 1004]
    assert result.form['category'] == 'H'


def test_search_filters(service, hospitals, caller1):
    assert _codes(service.search({'manager': 'g001'}, caller1)) == [1001, 1002]
    assert _codes(service.search({'name': 'mary'}, caller1)) == [1001, 1002]
    assert _codes(service.search({'specialty': 'PEDI'}, caller1)) == [1003]
    assert _codes(service.search({'priority': '2'}, caller1)) == [1002]
    assert _codes(service.search({'codeFrom': 1002, 'codeTo': 1003}, caller1)) == [1002, 1003]
    assert _codes(service.search({'code': 1004}, caller1)) == [1004]


def test_search_by_status(service, hospitals, caller1):
    service.seize('H', 1002, caller1)
    assert _codes(service.search({'status': 'SEIZED'}, caller1)) == [1002]
    assert _codes(service.search({'status': 'ACTIVE'}, caller1)) == [1001, 1003, 1004]


def test_search_reruns_the_query(service, hospitals, caller1, admin_caller):
    before = _codes(service.search({}, caller1))
    service.create(hospital_payload(name='Later'), admin_caller)
    after = _codes(service.search({}, caller1))
    assert after == before + [1005]


def test_inverted_code_range_is_rejected(service, caller1):
    with pytest.raises(ValidationFailed) as excinfo:
        service.search({'codeFrom': 2000, 'codeTo': 1000}, caller1)
    assert [(i.field, i.code) for i in excinfo.value.report] == [('codeTo', 'invalid_range')]


def test_search_check_only(service):
    assert service.search_check_only({'codeFrom': 1, 'codeTo': 5}).is_valid
    report = service.search_check_only({'codeFrom': 'abc', 'status': 'GONE'})
    assert set(report.fields()) == {'codeFrom', 'status'}


def test_list_form_prefills_the_callers_manager(service, caller1, admin_caller):
    result = service.list_form(caller1)
    assert result.form == {'category': 'H', 'manager': 'G001'}
    assert [c.code for c in result.catalogs['priority']][:3] == ['1', '2', '3']
    assert [c.code for c in result.catalogs['status']] == ['ACTIVE', 'INACTIVE', 'SEIZED']
    assert service.list_form(admin_caller).form['manager'] is None


def test_missing_catalog_leaves_dropdown_empty(service, caller1):
    from perceptors.models import Catalog

    Catalog.objects.filter(key='status').delete()
    result = service.list_form(caller1)
    assert result.catalogs['status'] == []
    assert result.catalogs['priority']


def test_new_form_lists_form_catalogs(service, caller1):
    result = service.new_form(caller1)
    assert result.action == 'new'
    assert set(result.catalogs) == {'priority', 'specialty', 'activity', 'line_of_business'}
    assert result.form['manager'] == 'G001'
