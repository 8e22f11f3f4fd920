from django.conf import settings
from rest_framework import serializers
from friendable.serializers import BaseSerializer, BaseInputSerializer
from .models import Friendship, Friendable, Status
from .refs import EntityRef


def page_size_limits():
    """
    (default, maximum) number of entities returned by the friends list.
    """
    conf = getattr(settings, 'FRIENDABLE', {})
    return conf.get('DEFAULT_PAGE_SIZE', 20), conf.get('MAX_PAGE_SIZE', 100)


def serialize_ref(ref):
    return {'type': ref.label, 'id': ref.object_id}


class FriendshipSerializer(BaseSerializer):
    """
    Serializer for Friendship rows, with both participants as {type, id}
    """
    sender = serializers.SerializerMethodField()
    recipient = serializers.SerializerMethodField()

    class Meta:
        model = Friendship
        fields = ['id', 'sender', 'recipient', 'status', 'created_at', 'updated_at']
        read_only_fields = ['id', 'status', 'created_at', 'updated_at']

    def get_sender(self, obj):
        return serialize_ref(obj.sender_ref)

    def get_recipient(self, obj):
        return serialize_ref(obj.recipient_ref)


class FriendableEntitySerializer(serializers.Serializer):
    """
    The other party of a relationship, whatever its model
    """
    type = serializers.SerializerMethodField()
    id = serializers.SerializerMethodField()
    name = serializers.SerializerMethodField()

    def get_type(self, obj):
        return EntityRef.of(obj).label

    def get_id(self, obj):
        return obj.pk

    def get_name(self, obj):
        return getattr(obj, 'full_name', None) or str(obj)


class TargetSerializer(BaseInputSerializer):
    """
    Identifies the other participant of an operation, e.g.
    {"target_type": "users.user", "target_id": 7}
    """
    target_type = serializers.CharField(max_length=100)
    target_id = serializers.IntegerField(min_value=1)

    def validate(self, attrs):
        try:
            ref = EntityRef.from_label(attrs['target_type'], attrs['target_id'])
        except (LookupError, ValueError):
            raise serializers.ValidationError(
                {'target_type': f"Unknown entity type '{attrs['target_type']}'."}
            )

        model = ref.model_class
        if not issubclass(model, Friendable):
            raise serializers.ValidationError(
                {'target_type': f"'{ref.label}' entities cannot have friends."}
            )

        if not model._default_manager.filter(pk=ref.object_id).exists():
            raise serializers.ValidationError(
                {'target_id': f"No {ref.label} with id {ref.object_id}."}
            )

        attrs['target'] = ref
        return attrs


class FriendListQuerySerializer(BaseInputSerializer):
    """
    Query parameters of the friends list
    """
    status = serializers.ChoiceField(choices=Status.CHOICES, required=False)
    limit = serializers.IntegerField(min_value=0, required=False)
    offset = serializers.IntegerField(min_value=0, default=0)

    def validate_limit(self, value):
        _, maximum = page_size_limits()
        if value > maximum:
            raise serializers.ValidationError(f"Ensure this value is less than or equal to {maximum}.")
        return value

    def validate(self, attrs):
        if attrs.get('limit') is None:
            default, _ = page_size_limits()
            attrs['limit'] = default
        attrs.setdefault('status', None)
        return attrs
