from django.db import models
from django.core.exceptions import ValidationError
from django.db.models import Q
from django.contrib.contenttypes.fields import GenericForeignKey, GenericRelation
from django.contrib.contenttypes.models import ContentType
from friendable.models import TimeStampedModel, ValidationModelMixin
from .refs import EntityRef, pair_key


class Status:
    """
    Relationship states. There is no "none" state: a missing row means no relationship.
    """
    PENDING = 'pending'
    ACCEPTED = 'accepted'
    DENIED = 'denied'
    BLOCKED = 'blocked'

    CHOICES = (
        (PENDING, 'Pending'),
        (ACCEPTED, 'Accepted'),
        (DENIED, 'Denied'),
        (BLOCKED, 'Blocked'),
    )

    values = (PENDING, ACCEPTED, DENIED, BLOCKED)

    @classmethod
    def validate(cls, status):
        if status not in cls.values:
            raise ValueError(f"Unknown friendship status {status!r}; expected one of {', '.join(cls.values)}")
        return status


class FriendshipQuerySet(models.QuerySet):

    def between(self, first, second):
        """Rows for the unordered pair, whichever side sent the request."""
        return self.filter(pair_key=pair_key(first, second))

    def directed(self, sender, recipient):
        sender, recipient = EntityRef.of(sender), EntityRef.of(recipient)
        return self.filter(
            sender_type_id=sender.content_type_id,
            sender_id=sender.object_id,
            recipient_type_id=recipient.content_type_id,
            recipient_id=recipient.object_id,
        )

    def received_by(self, entity):
        ref = EntityRef.of(entity)
        return self.filter(recipient_type_id=ref.content_type_id, recipient_id=ref.object_id)

    def involving(self, entity):
        ref = EntityRef.of(entity)
        return self.filter(
            Q(sender_type_id=ref.content_type_id, sender_id=ref.object_id)
            | Q(recipient_type_id=ref.content_type_id, recipient_id=ref.object_id)
        )

    def with_status(self, status=None):
        if not status:
            return self
        return self.filter(status=Status.validate(status))


class Friendship(TimeStampedModel, ValidationModelMixin):
    """
    A relationship between two friendable entities of any type.
    """
    sender_type = models.ForeignKey(
        ContentType,
        on_delete=models.CASCADE,
        related_name='+'
    )
    sender_id = models.PositiveBigIntegerField()
    sender = GenericForeignKey('sender_type', 'sender_id')

    recipient_type = models.ForeignKey(
        ContentType,
        on_delete=models.CASCADE,
        related_name='+'
    )
    recipient_id = models.PositiveBigIntegerField()
    recipient = GenericForeignKey('recipient_type', 'recipient_id')

    status = models.CharField(max_length=10, choices=Status.CHOICES, default=Status.PENDING)

    # Sorted "<content type>:<id>" keys of both participants
    pair_key = models.CharField(max_length=64, unique=True, editable=False)

    objects = FriendshipQuerySet.as_manager()

    class Meta:
        ordering = ['id']
        indexes = [
            models.Index(fields=['sender_type', 'sender_id', 'status'], name='friends_sender_status_idx'),
            models.Index(fields=['recipient_type', 'recipient_id', 'status'], name='friends_recipient_status_idx'),
        ]

    def __str__(self):
        return f"{self.sender_ref.key} -> {self.recipient_ref.key} ({self.status})"

    def clean(self):
        super().clean()
        participants = (self.sender_type_id, self.sender_id, self.recipient_type_id, self.recipient_id)
        if None in participants:
            return

        if self.sender_ref == self.recipient_ref:
            raise ValidationError("An entity cannot befriend itself.")

        self.pair_key = pair_key(self.sender_ref, self.recipient_ref)
        if Friendship.objects.filter(pair_key=self.pair_key).exclude(pk=self.pk).exists():
            raise ValidationError("A friendship between these entities already exists.")

    def save(self, *args, **kwargs):
        if not self.pair_key:
            self.pair_key = pair_key(self.sender_ref, self.recipient_ref)
        super().save(*args, **kwargs)

    @property
    def sender_ref(self):
        return EntityRef(self.sender_type_id, self.sender_id)

    @property
    def recipient_ref(self):
        return EntityRef(self.recipient_type_id, self.recipient_id)

    def other_party_ref(self, entity):
        """
        Reference to the participant that is not ``entity``.
        """
        ref = EntityRef.of(entity)
        if ref == self.sender_ref:
            return self.recipient_ref
        if ref == self.recipient_ref:
            return self.sender_ref
        raise ValueError(f"{ref.key} is not a participant of friendship {self.pk}")


class Friendable(models.Model):
    """
    Abstract base for models that can take part in friendships.

    The generic relations make deleting an entity delete its friendship rows.
    """
    sent_friendships = GenericRelation(
        Friendship,
        content_type_field='sender_type',
        object_id_field='sender_id',
    )
    received_friendships = GenericRelation(
        Friendship,
        content_type_field='recipient_type',
        object_id_field='recipient_id',
    )

    class Meta:
        abstract = True
