from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin
from .admin import friendable_admin_site
from users.models import User, Organization
from friends.models import Friendship


@admin.register(User, site=friendable_admin_site)
class UserAdmin(DjangoUserAdmin):
    list_display = ('username', 'email', 'date_joined', 'is_staff')
    search_fields = ('username', 'email')
    list_filter = ('is_active', 'is_staff', 'date_joined')
    fieldsets = DjangoUserAdmin.fieldsets + (
        ('Profile', {'fields': ('bio',)}),
    )


@admin.register(Organization, site=friendable_admin_site)
class OrganizationAdmin(admin.ModelAdmin):
    list_display = ('name', 'slug', 'created_at')
    search_fields = ('name', 'slug')
    prepopulated_fields = {'slug': ('name',)}


@admin.register(Friendship, site=friendable_admin_site)
class FriendshipAdmin(admin.ModelAdmin):
    list_display = ('id', 'sender_type', 'sender_id', 'recipient_type', 'recipient_id', 'status', 'created_at')
    list_filter = ('status', 'sender_type', 'recipient_type', 'created_at')
    search_fields = ('pair_key',)

    def get_readonly_fields(self, request, obj=None):
        # Participants never change once the row exists
        if obj is not None:
            return ('sender_type', 'sender_id', 'recipient_type', 'recipient_id', 'pair_key', 'created_at', 'updated_at')
        return ('pair_key', 'created_at', 'updated_at')
