from .models import Principal
from .provider import AuthError, get_auth_provider
from .rbac import READ, WRITE, AuthorizationGate

__all__ = ["AuthError", "AuthorizationGate", "Principal", "READ", "WRITE", "get_auth_provider"]
