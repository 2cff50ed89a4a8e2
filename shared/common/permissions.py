# shared/common/permissions.py
"""
Custom Permission Classes for Role-Based Access Control (RBAC)
"""

from typing import List
from rest_framework import permissions
from rest_framework.request import Request
from rest_framework.views import APIView
import logging

from .constants import UserRole

logger = logging.getLogger(__name__)


class BasePermission(permissions.BasePermission):
    """Base permission class with utility methods"""

    def get_user_roles(self, request: Request) -> List[str]:
        """Get roles from user object or JWT payload"""
        if hasattr(request.user, 'roles'):
            return request.user.roles
        if hasattr(request, 'auth') and isinstance(request.auth, dict):
            role = request.auth.get('role')
            return [role] if role else request.auth.get('roles', [])
        return []


class HasRole(BasePermission):
    """Check if user has required role(s)"""

    required_roles: List[str] = []
    message = 'You do not have the role required for this action.'

    def has_permission(self, request: Request, view: APIView) -> bool:
        if not request.user or not request.user.is_authenticated:
            return False

        user_roles = self.get_user_roles(request)
        allowed = bool(set(self.required_roles) & set(user_roles))
        if not allowed:
            logger.info(
                f"Role check failed for {request.user}: "
                f"has {user_roles}, needs one of {self.required_roles}"
            )
        return allowed


class IsPetOwner(HasRole):
    """Only pet owners (booking side of the marketplace)."""
    required_roles = [UserRole.PET_OWNER]
    message = 'Access denied. Only pet owners can perform this action.'


class IsServiceProvider(HasRole):
    required_roles = [UserRole.SERVICE_PROVIDER]
    message = 'Access denied. Only service providers can perform this action.'


class IsManager(HasRole):
    required_roles = [UserRole.MANAGER]
    message = 'Access denied. Only managers can perform this action.'


class IsProviderOrManager(HasRole):
    required_roles = [UserRole.SERVICE_PROVIDER, UserRole.MANAGER]
    message = 'Access denied. Only service providers or managers can perform this action.'
