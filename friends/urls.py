from django.urls import path, include
from rest_framework.routers import SimpleRouter
from .views import FriendshipViewSet

app_name = 'friends'

router = SimpleRouter()
router.register(r'', FriendshipViewSet, basename='friends')

urlpatterns = [
    path('', include(router.urls)),
]
