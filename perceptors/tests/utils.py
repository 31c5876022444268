"""Shared test data builders."""
import copy

from perceptors.models import Catalog, CatalogEntry, Manager, Perceptor, User

CATALOG_DATA = {
    'priority': [(str(n), f'Priority {n}') for n in range(1, 10)],
    'status': list(Perceptor.STATUS_CHOICES),
    'specialty': [('CARD', 'Cardiology'), ('NEUR', 'Neurology'), ('PEDI', 'Paediatrics')],
    'activity': [('PUB', 'Public'), ('PRI', 'Private')],
    'line_of_business': [('AMB', 'Outpatient'), ('HOS', 'Hospitalisation')],
}

HOSPITAL = {
    'name': 'St. Mary',
    'priority': '1',
    'specialty': 'CARD',
    'details': {
        'taxId': 'Q2866004A',
        'address': 'Calle Mayor 1',
        'postalCode': '28013',
    },
}


def hospital_payload(**overrides):
    payload = copy.deepcopy(HOSPITAL)
    payload.update(overrides)
    return payload


def seed_catalogs(keys=None):
    for key, entries in CATALOG_DATA.items():
        if keys is not None and key not in keys:
            continue
        catalog = Catalog.objects.create(key=key, description=key)
        for position, (code, label) in enumerate(entries):
            CatalogEntry.objects.create(catalog=catalog, code=code, label=label, position=position)


def make_manager(code, username, password='P@ssw0rd1'):
    user = User.objects.create_user(username=username, password=password, role=User.ROLE_MANAGER)
    manager = Manager.objects.create(code=code, name=username.capitalize(), user=user)
    return user, manager


def make_admin(username='admin1', password='P@ssw0rd1'):
    return User.objects.create_user(username=username, password=password, role=User.ROLE_ADMIN)
