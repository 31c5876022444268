"""
Database models for the perceptors backend.

A perceptor is a benefit/payment recipient; this app manages the
hospital category.  Besides the perceptor itself the models cover the
staff accounts that own perceptors (managers), the reference catalogs
that feed dropdown-style fields, the per-category code sequence and
an audit trail of lifecycle transitions.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from django.contrib.auth.models import AbstractUser
from django.db import models


@dataclass(frozen=True)
class PerceptorId:
    """Composite identifier: category discriminator plus numeric code.

    ``code`` stays ``None`` until the perceptor is created.
    """
    category: str
    code: Optional[int] = None

    def __str__(self) -> str:
        return f"{self.category}/{self.code if self.code is not None else '-'}"


class User(AbstractUser):
    """Staff account with an application role.

    Managers only reach the perceptors assigned to them (or unassigned
    ones); administrators, and Django superusers, reach every perceptor.
    """
    ROLE_MANAGER = 'manager'
    ROLE_ADMIN = 'admin'
    ROLE_CHOICES = [
        (ROLE_MANAGER, 'Manager'),
        (ROLE_ADMIN, 'Administrator'),
    ]
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default=ROLE_MANAGER)

    @property
    def is_administrator(self) -> bool:
        return self.is_superuser or self.role == self.ROLE_ADMIN

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"


class Manager(models.Model):
    """Staff member responsible for a subset of perceptors."""
    code = models.CharField(max_length=10, primary_key=True, help_text="Manager code (e.g. 'G001')")
    name = models.CharField(max_length=120)
    user = models.OneToOneField(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='manager'
    )
    active = models.BooleanField(default=True)

    def save(self, *args, **kwargs):
        # references are upper-cased by the forms, so codes are stored that way
        self.code = (self.code or "").strip().upper()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.name} ({self.code})"


class Catalog(models.Model):
    """A named list of reference codes (priorities, specialties, ...)."""
    key = models.CharField(max_length=40, primary_key=True)
    description = models.CharField(max_length=255, blank=True)

    def __str__(self) -> str:
        return self.key


class CatalogEntry(models.Model):
    catalog = models.ForeignKey(Catalog, on_delete=models.CASCADE, related_name='entries')
    code = models.CharField(max_length=10)
    label = models.CharField(max_length=120)
    position = models.PositiveIntegerField(default=0)

    class Meta:
        unique_together = [('catalog', 'code')]
        ordering = ['catalog', 'position', 'code']

    def __str__(self) -> str:
        return f"{self.catalog_id}:{self.code} {self.label}"


class PerceptorSequence(models.Model):
    """Last code handed out for a category.  Codes are never reused."""
    category = models.CharField(max_length=1, primary_key=True)
    last_code = models.PositiveIntegerField(default=0)

    def __str__(self) -> str:
        return f"{self.category} -> {self.last_code}"


class Perceptor(models.Model):
    """A benefit recipient.  ``status`` is only changed by the lifecycle service."""
    CATEGORY_HOSPITAL = 'H'

    STATUS_ACTIVE = 'ACTIVE'
    STATUS_INACTIVE = 'INACTIVE'
    STATUS_SEIZED = 'SEIZED'
    STATUS_CHOICES = (
        (STATUS_ACTIVE, 'Active'),
        (STATUS_INACTIVE, 'Inactive'),
        (STATUS_SEIZED, 'Seized'),
    )

    category = models.CharField(max_length=1)
    code = models.PositiveIntegerField()
    name = models.CharField(max_length=120)
    priority = models.CharField(max_length=10)
    specialty = models.CharField(max_length=10)
    activity = models.CharField(max_length=10, blank=True)
    line_of_business = models.CharField(max_length=10, blank=True)
    # Frequently filtered by the search screen.
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_ACTIVE, db_index=True)
    # Null means the perceptor is unassigned and every manager may reach it.
    manager = models.ForeignKey(
        Manager, null=True, blank=True, on_delete=models.SET_NULL, related_name='perceptors'
    )
    # Category specific fields (tax id, address, postal code, ...).
    details = models.JSONField(default=dict, blank=True)
    # Bumped by every mutation; clients send it back to detect lost updates.
    version = models.PositiveIntegerField(default=1)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['category', 'code'], name='uniq_perceptor_category_code'),
        ]
        indexes = [
            models.Index(fields=['category', 'manager', 'status'], name='perceptor_cat_mgr_status_idx'),
        ]
        ordering = ['category', 'code']

    @property
    def perceptor_id(self) -> PerceptorId:
        return PerceptorId(self.category, self.code)

    def __str__(self) -> str:
        return f"{self.name} ({self.perceptor_id})"


class PerceptorTransition(models.Model):
    """Records one lifecycle operation applied to a perceptor."""
    ACTION_CHOICES = (
        ('create', 'create'),
        ('update', 'update'),
        ('deactivate', 'deactivate'),
        ('seize', 'seize'),
        ('reactivate', 'reactivate'),
    )
    perceptor = models.ForeignKey(Perceptor, related_name='transitions', on_delete=models.CASCADE)
    action = models.CharField(max_length=16, choices=ACTION_CHOICES)
    from_status = models.CharField(max_length=10, null=True, blank=True)
    to_status = models.CharField(max_length=10)
    operator = models.CharField(max_length=150, blank=True)
    version = models.PositiveIntegerField(default=1)
    timestamp = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['perceptor', 'timestamp'], name='perceptor_transition_ts_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.perceptor_id}: {self.action} {self.from_status} → {self.to_status}"
