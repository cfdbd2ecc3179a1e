"""
Core dependencies for route handlers
"""

from fastapi import Request, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.config import Settings
from app.core.components import AuthComponents
from app.modules.auth.service import AuthService

security = HTTPBearer()


def get_components(request: Request) -> AuthComponents:
    return request.app.state.auth


def get_auth_service(request: Request) -> AuthService:
    return get_components(request).auth_service


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_current_token(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> str:
    """Extract JWT token from Authorization header"""
    return credentials.credentials
