"""
Management command to populate the database with test data.
"""
from django.contrib.auth.hashers import make_password
from django.core.management.base import BaseCommand
from django.db import transaction

from perceptors.models import Catalog, CatalogEntry, Manager, Perceptor, User
from perceptors.services.catalogs import refresh_all
from perceptors.services.lifecycle import PerceptorLifecycle
from perceptors.services.security import CallerContext

CATALOGS = {
    'priority': ('Hospital priority', [(str(n), f'Priority {n}') for n in range(1, 10)]),
    'status': ('Perceptor status', [(s, label) for s, label in Perceptor.STATUS_CHOICES]),
    'specialty': ('Medical specialty', [
        ('CARD', 'Cardiology'),
        ('NEUR', 'Neurology'),
        ('ONCO', 'Oncology'),
        ('PEDI', 'Paediatrics'),
        ('TRAU', 'Traumatology'),
        ('GENE', 'General medicine'),
    ]),
    'activity': ('Activity', [
        ('PUB', 'Public'),
        ('PRI', 'Private'),
        ('CON', 'Contracted'),
    ]),
    'line_of_business': ('Line of business', [
        ('AMB', 'Outpatient'),
        ('HOS', 'Hospitalisation'),
        ('REH', 'Rehabilitation'),
    ]),
}

MANAGERS = [
    # code, name, username, role
    ('G001', 'Laura Gil', 'manager1', User.ROLE_MANAGER),
    ('G002', 'Pablo Ortega', 'manager2', User.ROLE_MANAGER),
]

ADMINS = ['admin1']

HOSPITALS = [
    ('St. Mary', '1', 'CARD', 'PUB', 'HOS', 'G001', 'Q2866004A', 'Calle Mayor 1', 'Madrid', '28013'),
    ('General Norte', '2', 'GENE', 'PUB', 'AMB', 'G001', 'Q0801175A', 'Avenida Diagonal 200', 'Barcelona', '08018'),
    ('Clinica del Sur', '3', 'TRAU', 'PRI', 'REH', 'G002', 'B41234567', 'Calle Feria 12', 'Sevilla', '41003'),
    ('Infantil Levante', '2', 'PEDI', 'CON', 'HOS', 'G002', 'A46123450', 'Paseo Alameda 5', 'Valencia', '46010'),
    ('Centro Oncologico', '1', 'ONCO', 'PRI', 'HOS', None, 'B15000000', 'Rua Nova 33', 'A Coruna', '15001'),
]


class Command(BaseCommand):
    help = 'Populate database with test data'

    def handle(self, *args, **options):
        self.stdout.write('Creating test data...')
        with transaction.atomic():
            self.create_catalogs()
            self.create_managers()
            self.create_admins()
            self.create_hospitals()
        refresh_all()
        self.stdout.write(self.style.SUCCESS('Test data created.'))

    def create_catalogs(self):
        for key, (description, entries) in CATALOGS.items():
            catalog, _ = Catalog.objects.update_or_create(key=key, defaults={'description': description})
            for position, (code, label) in enumerate(entries):
                CatalogEntry.objects.update_or_create(
                    catalog=catalog, code=code, defaults={'label': label, 'position': position}
                )
            self.stdout.write(f'catalog: {key} ({len(entries)} entries)')

    def create_managers(self):
        for code, name, username, role in MANAGERS:
            first, _, last = name.partition(' ')
            user, _ = User.objects.get_or_create(
                username=username,
                defaults={
                    'password': make_password('123456'),
                    'role': role,
                    'first_name': first,
                    'last_name': last,
                },
            )
            Manager.objects.update_or_create(code=code, defaults={'name': name, 'user': user, 'active': True})
            self.stdout.write(f'manager: {code} -> {username}')

    def create_admins(self):
        for username in ADMINS:
            User.objects.get_or_create(
                username=username,
                defaults={'password': make_password('123456'), 'role': User.ROLE_ADMIN, 'is_staff': True},
            )
            self.stdout.write(f'administrator: {username}')

    def create_hospitals(self):
        lifecycle = PerceptorLifecycle()
        operator = CallerContext(user_id='populate_data', is_admin=True)
        for name, priority, specialty, activity, lob, manager, tax_id, address, city, postal in HOSPITALS:
            if Perceptor.objects.filter(category=Perceptor.CATEGORY_HOSPITAL, name=name).exists():
                continue
            perceptor = lifecycle.create(Perceptor.CATEGORY_HOSPITAL, {
                'name': name,
                'priority': priority,
                'specialty': specialty,
                'activity': activity,
                'lineOfBusiness': lob,
                'manager': manager,
                'details': {'taxId': tax_id, 'address': address, 'city': city, 'postalCode': postal},
            }, operator)
            self.stdout.write(f'hospital: {perceptor.perceptor_id} {name}')
