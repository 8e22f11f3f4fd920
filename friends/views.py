from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from friendable.permissions import IsActive, IsFriendable
from friendable.views import BaseViewSet
from . import store
from .serializers import (
    FriendshipSerializer, FriendableEntitySerializer, TargetSerializer,
    FriendListQuerySerializer, serialize_ref,
)
import logging

logger = logging.getLogger('friendable')


class FriendshipViewSet(BaseViewSet):
    """
    Friend requests and relationship queries for the current user.

    Every operation other than the list takes the other participant as
    ``target_type`` ("app_label.model") and ``target_id``.
    """
    permission_classes = [IsAuthenticated, IsActive, IsFriendable]

    def get_target(self, data):
        serializer = TargetSerializer(data=data)
        serializer.is_valid(raise_exception=True)
        target = serializer.validated_data['target']
        # Picked up by RequestLogMiddleware
        self.request._request.friendship_target = target
        return target

    def list(self, request):
        """
        List the other parties of the user's relationships, optionally by status
        """
        query = FriendListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data

        find = store.FRIENDS_BY_STATUS[params['status']]
        entities = find(request.user, limit=params['limit'], offset=params['offset'])

        return Response({
            'status': params['status'],
            'limit': params['limit'],
            'offset': params['offset'],
            'results': FriendableEntitySerializer(entities, many=True).data,
        })

    @action(detail=False, methods=['GET'])
    def requests(self, request):
        """
        Pending friend requests received by the current user
        """
        friendships = store.get_friend_requests(request.user)
        return Response(FriendshipSerializer(friendships, many=True).data)

    @action(detail=False, methods=['GET'])
    def relationship(self, request):
        """
        Relationship state between the current user and a target
        """
        target = self.get_target(request.query_params)
        friendship = store.get_friendship(request.user, target)

        return Response({
            'target': serialize_ref(target),
            'friendship': FriendshipSerializer(friendship).data if friendship else None,
            'is_friends': friendship is not None,
            'has_blocked': store.has_blocked(request.user, target),
            'is_blocked_by': store.is_blocked_by(request.user, target),
        })

    @action(detail=False, methods=['POST'])
    def befriend(self, request):
        """
        Send a friend request
        """
        target = self.get_target(request.data)
        friendship = store.befriend(request.user, target)
        return Response(FriendshipSerializer(friendship).data, status=status.HTTP_201_CREATED)

    def _transition(self, request, operation):
        target = self.get_target(request.data)
        friendship = operation(request.user, target)
        return Response(FriendshipSerializer(friendship).data)

    @action(detail=False, methods=['POST'])
    def accept(self, request):
        return self._transition(request, store.accept_friend_request)

    @action(detail=False, methods=['POST'])
    def deny(self, request):
        return self._transition(request, store.deny_friend_request)

    @action(detail=False, methods=['POST'])
    def block(self, request):
        return self._transition(request, store.block_friend_request)

    @action(detail=False, methods=['POST'])
    def unblock(self, request):
        return self._transition(request, store.unblock_friend_request)

    @action(detail=False, methods=['POST'])
    def unfriend(self, request):
        """
        Remove the relationship with the target, whatever its status
        """
        target = self.get_target(request.data)
        store.unfriend(request.user, target)
        return Response({"message": "Friend removed successfully"}, status=status.HTTP_200_OK)
