from django.contrib.admin import AdminSite


class FriendableAdminSite(AdminSite):
    site_header = 'Friendable Administration'
    site_title = 'Friendable Admin'
    index_title = 'Friendships Dashboard'


friendable_admin_site = FriendableAdminSite(name='friendable_admin')
