from django.db import models
from django.core.exceptions import ValidationError
import logging

logger = logging.getLogger('friendable')


class TimeStampedModel(models.Model):
    """
    An abstract base class model that provides self-updating
    created_at and updated_at fields.
    """
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class ValidationModelMixin(models.Model):
    """
    Mixin that logs validation errors.
    """
    class Meta:
        abstract = True

    def full_clean(self, *args, **kwargs):
        try:
            return super().full_clean(*args, **kwargs)
        except ValidationError as e:
            logger.warning(
                f"Validation error on {self.__class__.__name__} (id={getattr(self, 'id', 'new')}): {e}"
            )
            raise
