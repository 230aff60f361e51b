from rest_framework.authentication import TokenAuthentication


class BearerTokenAuthentication(TokenAuthentication):
    """Token authentication using ``Authorization: Bearer <token>``."""

    keyword = "Bearer"
