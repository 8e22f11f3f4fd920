"""
Polymorphic entity references.

A friendship participant is identified by the pair (content type, primary key),
so a User can be friends with an Organization as easily as with another User.
"""

from typing import NamedTuple

from django.apps import apps
from django.contrib.contenttypes.models import ContentType
from django.db import models


class EntityRef(NamedTuple):
    content_type_id: int
    object_id: int

    @classmethod
    def of(cls, entity):
        """
        Build a reference from a saved model instance. References are returned as is.
        """
        if isinstance(entity, EntityRef):
            return entity
        if not isinstance(entity, models.Model):
            raise TypeError(f"Cannot reference {entity!r}: expected a model instance or EntityRef")
        if entity.pk is None:
            raise ValueError(f"Cannot reference unsaved {entity.__class__.__name__} instance")
        content_type = ContentType.objects.get_for_model(entity)
        return cls(content_type.pk, entity.pk)

    @classmethod
    def from_label(cls, label, object_id):
        """
        Build a reference from an "app_label.model" label, e.g. "users.user".

        Raises LookupError for unknown labels.
        """
        model = apps.get_model(label)
        content_type = ContentType.objects.get_for_model(model)
        return cls(content_type.pk, object_id)

    @property
    def content_type(self):
        return ContentType.objects.get_for_id(self.content_type_id)

    @property
    def model_class(self):
        return self.content_type.model_class()

    @property
    def label(self):
        content_type = self.content_type
        return f"{content_type.app_label}.{content_type.model}"

    @property
    def key(self):
        return f"{self.content_type_id}:{self.object_id}"

    def resolve(self):
        """Fetch the referenced instance; raises DoesNotExist if it is gone."""
        return self.content_type.get_object_for_this_type(pk=self.object_id)


def pair_key(first, second):
    """
    Canonical key for an unordered pair of entities.
    """
    keys = sorted([EntityRef.of(first).key, EntityRef.of(second).key])
    return '|'.join(keys)
