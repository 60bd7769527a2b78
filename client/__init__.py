from client.api_client import SynergyClient
from client.auth_errors import ApiError, AuthErrorHandler, AuthenticationHandled, UnauthorizedError
from client.query_cache import QueryCache
from client.token_provider import TokenProvider
