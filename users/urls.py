from django.urls import path, include
from rest_framework.routers import SimpleRouter
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView
from .views import UserViewSet, OrganizationViewSet, RegistrationView

app_name = 'users'

router = SimpleRouter()
router.register(r'organizations', OrganizationViewSet, basename='organizations')
router.register(r'', UserViewSet, basename='users')

urlpatterns = [
    # Auth routes
    path('auth/token/', TokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('auth/token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('auth/register/', RegistrationView.as_view(), name='register'),

    path('', include(router.urls)),
]
