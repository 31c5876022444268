from django.contrib.auth.hashers import make_password
from django.core.management.base import BaseCommand

from perceptors.models import Manager, User

# username, role, manager code
TEST_SET = [
    ("admin1", User.ROLE_ADMIN, None),
    ("manager1", User.ROLE_MANAGER, "G001"),
    ("manager2", User.ROLE_MANAGER, "G002"),
]


class Command(BaseCommand):
    help = "Ensure test users exist and password=123456 (idempotent)."

    def handle(self, *args, **opts):
        for username, role, manager_code in TEST_SET:
            u, created = User.objects.get_or_create(
                username=username,
                defaults={"role": role, "password": make_password("123456"), "is_active": True},
            )
            if not created:
                # reset password, activation and role
                u.password = make_password("123456")
                u.role = role
                u.is_active = True
                u.save(update_fields=["password", "role", "is_active"])
            if manager_code:
                Manager.objects.update_or_create(
                    code=manager_code,
                    defaults={"name": u.get_full_name() or username, "user": u, "active": True},
                )
            self.stdout.write(self.style.SUCCESS(f"ok: {username} ({role})"))
        self.stdout.write(self.style.SUCCESS("All test users ensured."))
