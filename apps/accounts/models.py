"""
Accounts Models - customer and admin accounts
Tables: Users
"""
from django.contrib.auth.hashers import check_password, make_password
from django.db import models
from django.utils import timezone

from apps.core.models import BaseModel
from .loyalty import BRONZE, TIER_CHOICES, tier_for_points


class User(BaseModel):
    """
    Storefront account. Carries credentials, loyalty state, environmental
    impact counters and the login lockout state.
    """
    ROLE_USER = 'user'
    ROLE_ADMIN = 'admin'
    ROLE_CHOICES = [
        (ROLE_USER, 'User'),
        (ROLE_ADMIN, 'Admin'),
    ]

    name = models.CharField(max_length=50)
    email = models.EmailField(unique=True)
    password = models.CharField(max_length=128)
    phone = models.CharField(max_length=20, blank=True, null=True)
    address = models.JSONField(default=dict, blank=True, help_text="street, city, postal_code, country")
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default=ROLE_USER)
    is_active = models.BooleanField(default=True)

    # Environmental impact tracking
    total_co2_saved = models.FloatField(default=0)
    total_water_saved = models.FloatField(default=0)
    total_oranges_recycled = models.PositiveIntegerField(default=0, help_text="Orange peels recycled")

    # Loyalty system
    loyalty_points = models.PositiveIntegerField(default=0)
    tier = models.CharField(max_length=10, choices=TIER_CHOICES, default=BRONZE)

    member_since = models.DateTimeField(default=timezone.now)
    preferences = models.JSONField(default=list, blank=True)
    last_login = models.DateTimeField(blank=True, null=True)

    # Security fields
    failed_login_attempts = models.PositiveIntegerField(default=0)
    lock_until = models.DateTimeField(blank=True, null=True)

    class Meta:
        db_table = 'accounts_users'
        verbose_name = 'User'
        verbose_name_plural = 'Users'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['-loyalty_points'], name='accounts_loyalty_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.email})"

    # DRF treats whatever the authentication class returns as request.user
    @property
    def is_authenticated(self):
        return True

    @property
    def is_anonymous(self):
        return False

    @property
    def is_admin(self):
        return self.role == self.ROLE_ADMIN

    def set_password(self, raw_password):
        self.password = make_password(raw_password)

    def check_password(self, raw_password):
        return check_password(raw_password, self.password)

    def is_locked(self, now=None):
        now = now or timezone.now()
        return self.lock_until is not None and self.lock_until > now

    def refresh_tier(self):
        self.tier = tier_for_points(self.loyalty_points)
        return self.tier

    def add_loyalty_points(self, points: int):
        """Add points and recompute the tier. Does not save."""
        if points < 0:
            raise ValueError("Loyalty points cannot be removed")
        self.loyalty_points += points
        self.refresh_tier()

    def add_impact(self, co2_saved: float, water_saved: float, oranges_recycled: int):
        """
        Accumulate impact counters. One loyalty point is awarded per whole
        kilogram of CO2 saved. Does not save.
        """
        if co2_saved < 0 or water_saved < 0 or oranges_recycled < 0:
            raise ValueError("Impact counters can only grow")
        self.total_co2_saved += co2_saved
        self.total_water_saved += water_saved
        self.total_oranges_recycled += oranges_recycled
        self.add_loyalty_points(int(co2_saved))
