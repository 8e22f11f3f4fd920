from rest_framework import status, generics
from rest_framework.response import Response
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework_simplejwt.tokens import RefreshToken
from django.contrib.auth import get_user_model
from django.db import transaction
from friendable.views import BaseReadOnlyViewSet
from .models import Organization
from .serializers import UserSerializer, UserRegistrationSerializer, OrganizationSerializer
import logging

User = get_user_model()
logger = logging.getLogger('friendable')


class UserViewSet(BaseReadOnlyViewSet):
    """
    API viewset for browsing users.
    """
    queryset = User.objects.filter(is_active=True).order_by('id')
    serializer_class = UserSerializer

    @action(detail=False, methods=['get'])
    def me(self, request):
        """
        Get the current user's profile
        """
        serializer = self.get_serializer(request.user)
        return Response(serializer.data)


class OrganizationViewSet(BaseReadOnlyViewSet):
    """
    API viewset for browsing organizations.
    """
    queryset = Organization.objects.all()
    serializer_class = OrganizationSerializer


class RegistrationView(generics.CreateAPIView):
    """
    API view for user registration
    """
    queryset = User.objects.all()
    serializer_class = UserRegistrationSerializer
    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        with transaction.atomic():
            user = serializer.save()

        refresh = RefreshToken.for_user(user)
        return Response({
            'message': 'User registered successfully',
            'user': UserSerializer(user).data,
            'tokens': {
                'refresh': str(refresh),
                'access': str(refresh.access_token),
            }
        }, status=status.HTTP_201_CREATED)
