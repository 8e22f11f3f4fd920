from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils.text import slugify
from friendable.models import TimeStampedModel, ValidationModelMixin
from friends.models import Friendable
import logging

logger = logging.getLogger('friendable')


class User(AbstractUser, Friendable, ValidationModelMixin):
    """
    Custom User model that can send and receive friend requests.
    """
    # Email is unique and case-insensitive
    email = models.EmailField(
        unique=True,
        error_messages={
            'unique': "A user with that email already exists.",
        },
    )

    bio = models.TextField(blank=True, null=True)

    class Meta:
        verbose_name = 'User'
        verbose_name_plural = 'Users'

    def __str__(self):
        return self.username

    def save(self, *args, **kwargs):
        """Override save to normalize email"""
        if self.email:
            self.email = self.email.lower()

        super().save(*args, **kwargs)

    @property
    def full_name(self):
        """Get the user's full name or username if not available"""
        if self.first_name and self.last_name:
            return f"{self.first_name} {self.last_name}"
        elif self.first_name:
            return self.first_name
        return self.username


class Organization(TimeStampedModel, Friendable, ValidationModelMixin):
    """
    A group that can befriend users and other organizations.
    """
    name = models.CharField(max_length=150)
    slug = models.SlugField(max_length=150, unique=True)
    description = models.TextField(blank=True, null=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = slugify(self.name)
        super().save(*args, **kwargs)

    @property
    def full_name(self):
        return self.name
