class FriendshipError(Exception):
    """
    Base class for errors raised by the friendship store.
    """
    default_message = 'Friendship error'

    def __init__(self, actor=None, target=None, message=None):
        self.actor = actor
        self.target = target
        super().__init__(message or self.default_message)


class RelationshipNotFound(FriendshipError):
    """
    No friendship row exists for the requested pair.
    """
    default_message = 'No relationship exists between these entities'


class DuplicateRelationship(FriendshipError):
    """
    The pair already has a friendship row (in either direction).
    """
    default_message = 'A relationship already exists between these entities'


class SelfRelationship(FriendshipError):
    default_message = 'An entity cannot befriend itself'
