"""
Manual Permissions
Admin access for the manual site.
"""
from rest_framework import permissions


class IsManualAdmin(permissions.BasePermission):
    """
    Only authenticated staff users can manage manual content and read
    analytics. Applies to every method, reads included.
    """
    message = 'Admin access required.'

    def has_permission(self, request, view):
        return bool(
            request.user and
            request.user.is_authenticated and
            request.user.is_staff
        )
