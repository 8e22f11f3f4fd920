from rest_framework import serializers
import logging

logger = logging.getLogger('friendable')


class ValidationLoggingMixin:
    """
    Logs validation errors before they are returned or raised.
    """

    def is_valid(self, raise_exception=False):
        valid = super().is_valid(raise_exception=False)

        if not valid and self.errors:
            logger.warning(
                f"Validation failed for {self.__class__.__name__}: {self.errors}"
            )

        if not valid and raise_exception:
            raise serializers.ValidationError(self.errors)

        return valid


class BaseSerializer(ValidationLoggingMixin, serializers.ModelSerializer):
    """
    Model serializer that logs validation and representation errors.
    """

    def to_representation(self, instance):
        try:
            return super().to_representation(instance)
        except Exception as e:
            logger.error(
                f"Error in {self.__class__.__name__}.to_representation: {str(e)}"
            )
            raise


class BaseInputSerializer(ValidationLoggingMixin, serializers.Serializer):
    """
    Plain serializer for request payloads and query parameters.
    """
