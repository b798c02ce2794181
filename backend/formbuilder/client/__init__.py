from formbuilder.client.api import ApiError, AuthenticationRequired, FormBuilderClient
from formbuilder.client.cache import QueryCache

__all__ = ["ApiError", "AuthenticationRequired", "FormBuilderClient", "QueryCache"]
