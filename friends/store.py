"""
Friendship operations between two friendable entities.

Every function takes both participants explicitly. A participant is either a
saved model instance or an ``EntityRef``.
"""

import logging
from collections import defaultdict

from django.contrib.contenttypes.models import ContentType
from django.db import IntegrityError, transaction

from .exceptions import DuplicateRelationship, RelationshipNotFound, SelfRelationship
from .models import Friendship, Status
from .refs import EntityRef

logger = logging.getLogger('friendable')


def befriend(actor, target):
    """
    Send a friend request from ``actor`` to ``target``.

    Args:
        actor: The entity sending the request
        target: The entity receiving it

    Returns:
        The new pending Friendship

    Raises:
        SelfRelationship: actor and target are the same entity
        DuplicateRelationship: the pair already has a friendship in either direction
    """
    sender, recipient = EntityRef.of(actor), EntityRef.of(target)
    if sender == recipient:
        raise SelfRelationship(actor, target)

    try:
        with transaction.atomic():
            if Friendship.objects.between(sender, recipient).exists():
                raise DuplicateRelationship(actor, target)
            friendship = Friendship.objects.create(
                sender_type_id=sender.content_type_id,
                sender_id=sender.object_id,
                recipient_type_id=recipient.content_type_id,
                recipient_id=recipient.object_id,
                status=Status.PENDING,
            )
    except IntegrityError:
        if not Friendship.objects.between(sender, recipient).exists():
            logger.error(f"Friend request {sender.key} -> {recipient.key} failed integrity checks")
            raise
        # Lost a race with a concurrent befriend for the same pair
        logger.warning(f"Concurrent friend request between {sender.key} and {recipient.key}")
        raise DuplicateRelationship(actor, target)

    logger.info(f"Friend request {friendship.pk}: {sender.key} -> {recipient.key}")
    return friendship


def unfriend(actor, target):
    """
    Delete the relationship between ``actor`` and ``target`` whatever its status.
    """
    with transaction.atomic():
        deleted, _ = Friendship.objects.between(actor, target).delete()
        if not deleted:
            raise RelationshipNotFound(actor, target)

    logger.info(f"Relationship removed between {EntityRef.of(actor).key} and {EntityRef.of(target).key}")


def is_friends_with(actor, target, status=None):
    """
    Whether a relationship exists for the pair, optionally in a given status.
    """
    return Friendship.objects.between(actor, target).with_status(status).exists()


def _set_status(actor, target, status):
    with transaction.atomic():
        friendship = Friendship.objects.select_for_update().between(actor, target).first()
        if friendship is None:
            raise RelationshipNotFound(actor, target)
        previous = friendship.status
        friendship.status = status
        friendship.save(update_fields=['status', 'updated_at'])

    logger.info(f"Friendship {friendship.pk}: {previous} -> {status}")
    return friendship


def accept_friend_request(actor, target):
    return _set_status(actor, target, Status.ACCEPTED)


def deny_friend_request(actor, target):
    return _set_status(actor, target, Status.DENIED)


def block_friend_request(actor, target):
    return _set_status(actor, target, Status.BLOCKED)


def unblock_friend_request(actor, target):
    """Put a relationship back to pending, whatever its current status."""
    return _set_status(actor, target, Status.PENDING)


def get_friendship(actor, target):
    """
    The Friendship for the pair, or None.
    """
    return Friendship.objects.between(actor, target).first()


def get_friendships(actor, status=None):
    """
    Queryset of friendships where ``actor`` is sender or recipient.
    """
    return Friendship.objects.involving(actor).with_status(status).order_by('id')


def _paginate(queryset, limit, offset):
    if limit is not None and limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")
    if offset is None:
        offset = 0
    if offset < 0:
        raise ValueError(f"offset must be non-negative, got {offset}")
    if limit is None:
        return queryset[offset:]
    return queryset[offset:offset + limit]


def _resolve_entities(refs):
    """
    Fetch the instances behind ``refs`` with one query per entity type,
    keeping the order of ``refs``.
    """
    ids_by_type = defaultdict(set)
    for ref in refs:
        ids_by_type[ref.content_type_id].add(ref.object_id)

    found = {}
    for content_type_id, ids in ids_by_type.items():
        model = ContentType.objects.get_for_id(content_type_id).model_class()
        if model is None:
            logger.warning(f"Content type {content_type_id} has no model; skipping {len(ids)} entities")
            continue
        for pk, instance in model._default_manager.in_bulk(list(ids)).items():
            found[EntityRef(content_type_id, pk)] = instance

    entities = []
    for ref in refs:
        if ref in found:
            entities.append(found[ref])
        else:
            logger.warning(f"Friendship references missing entity {ref.key}")
    return entities


def _find_friends(actor, status, limit, offset):
    ref = EntityRef.of(actor)
    friendships = _paginate(get_friendships(ref, status), limit, offset)
    return _resolve_entities([friendship.other_party_ref(ref) for friendship in friendships])


def get_all_friendships(actor, limit=None, offset=0):
    """
    The other parties of every relationship ``actor`` takes part in.

    Args:
        actor: The entity whose relationships are listed
        limit: Maximum number of entities to return (None for all)
        offset: Number of relationships to skip

    Returns:
        List of entity instances ordered by friendship id
    """
    return _find_friends(actor, None, limit, offset)


def get_pending_friendships(actor, limit=None, offset=0):
    return _find_friends(actor, Status.PENDING, limit, offset)


def get_accepted_friendships(actor, limit=None, offset=0):
    return _find_friends(actor, Status.ACCEPTED, limit, offset)


def get_denied_friendships(actor, limit=None, offset=0):
    return _find_friends(actor, Status.DENIED, limit, offset)


def get_blocked_friendships(actor, limit=None, offset=0):
    return _find_friends(actor, Status.BLOCKED, limit, offset)


FRIENDS_BY_STATUS = {
    None: get_all_friendships,
    Status.PENDING: get_pending_friendships,
    Status.ACCEPTED: get_accepted_friendships,
    Status.DENIED: get_denied_friendships,
    Status.BLOCKED: get_blocked_friendships,
}


def has_blocked(actor, target):
    """
    True if the pair's relationship is blocked. False when there is no relationship.
    """
    return is_friends_with(actor, target, Status.BLOCKED)


def is_blocked_by(actor, target):
    """
    True if the relationship sent by ``actor`` to ``target`` is blocked.

    Only the row with ``actor`` as sender is considered.
    """
    return Friendship.objects.directed(actor, target).with_status(Status.BLOCKED).exists()


def get_friend_requests(actor):
    """
    Pending requests received by ``actor``.
    """
    return Friendship.objects.received_by(actor).with_status(Status.PENDING).order_by('id')
