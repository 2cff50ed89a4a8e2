# shared/common/authentication.py
"""
JWT Authentication

Tokens are issued by the auth service; this module only verifies them and
turns the payload into a request principal.
"""

import jwt
import logging
from typing import Optional, Dict, Any, Tuple
from django.conf import settings
from rest_framework import authentication, exceptions
from rest_framework.request import Request

logger = logging.getLogger(__name__)


class JWTAuthentication(authentication.BaseAuthentication):
    """
    JWT Token Authentication for API requests.
    Algorithm, key and issuer come from ``settings.JWT_SETTINGS``.
    """

    keyword = 'Bearer'

    def authenticate(self, request: Request) -> Optional[Tuple[Any, Dict]]:
        auth_header = authentication.get_authorization_header(request)

        if not auth_header:
            return None

        try:
            auth_parts = auth_header.decode('utf-8').split()
        except UnicodeDecodeError:
            raise exceptions.AuthenticationFailed('Invalid token header encoding')

        if len(auth_parts) != 2:
            raise exceptions.AuthenticationFailed('Invalid token header format')

        if auth_parts[0].lower() != self.keyword.lower():
            return None

        token = auth_parts[1]
        return self.authenticate_token(token)

    def authenticate_token(self, token: str) -> Tuple[Any, Dict]:
        """Validate and decode JWT token"""
        jwt_settings = settings.JWT_SETTINGS
        options = {'require': ['exp'], 'verify_exp': True}
        if jwt_settings.get('ISSUER'):
            options['verify_iss'] = True

        try:
            payload = jwt.decode(
                token,
                jwt_settings['VERIFYING_KEY'],
                algorithms=[jwt_settings['ALGORITHM']],
                issuer=jwt_settings.get('ISSUER'),
                options=options,
            )
        except jwt.ExpiredSignatureError:
            raise exceptions.AuthenticationFailed('Token has expired')
        except jwt.InvalidTokenError as e:
            logger.warning(f"Invalid token: {e}")
            raise exceptions.AuthenticationFailed('Invalid token')

        if not (payload.get('sub') or payload.get('userid')):
            raise exceptions.AuthenticationFailed('Token has no subject')

        user = TokenUser(payload)
        return (user, payload)

    def authenticate_header(self, request: Request) -> str:
        return self.keyword


class TokenUser:
    """
    User object created from JWT token payload.

    The auth service puts a single ``role`` claim in its tokens; ``roles``
    is kept as a list so permission classes can treat both shapes alike.
    """

    def __init__(self, payload: Dict):
        self.payload = payload
        self.id = str(payload.get('sub') or payload.get('userid'))
        self.user_id = self.id
        self.email = payload.get('email')
        self.role = payload.get('role')
        roles = list(payload.get('roles', []))
        if self.role and self.role not in roles:
            roles.append(self.role)
        self.roles = roles
        self.is_active = True
        self.is_authenticated = True
        self.is_anonymous = False

    def __str__(self) -> str:
        return f"TokenUser({self.email or self.id})"

    def has_role(self, role: str) -> bool:
        """Check if user has a specific role"""
        return role in self.roles

    def has_any_role(self, roles: list) -> bool:
        """Check if user has any of the specified roles"""
        return bool(set(self.roles) & set(roles))
