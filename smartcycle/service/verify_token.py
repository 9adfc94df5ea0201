"""
Verify Token
------------

A number of API token verification strategies. A verifier resolves
a bearer token to the ``auth_id`` of a :class:`~smartcycle.models.user.User`.
"""
from abc import ABC, abstractmethod

from aiohttp.web_request import Request
from jose import jwt, ExpiredSignatureError, JWTError


class TokenVerificationError(Exception):
    pass


class TokenVerifier(ABC):

    @abstractmethod
    def verify_token(self, token) -> str:
        """
        Given a token, verifies it, returning the subject of the token or a token verification error.

        :raises TokenVerificationError: When the provided token is invalid.
        """


class JWTVerifier(TokenVerifier):
    """
    Verifies a signed JWT, returning its subject.
    """

    def __init__(self, secret: str, algorithm: str = "HS256"):
        self.secret = secret
        self.algorithm = algorithm

    def verify_token(self, token, verify_exp=True) -> str:
        if not isinstance(token, str):
            raise TypeError(f"Token must be of type string, not {type(token)}")

        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={'verify_exp': verify_exp}
            )
        except ExpiredSignatureError as e:
            raise TokenVerificationError("Token is expired.") from e
        except JWTError as e:
            raise TokenVerificationError("Token is invalid.") from e

        subject = claims.get("sub", claims.get("id"))
        if subject is None:
            raise TokenVerificationError("Token has no subject.")

        return str(subject)


class DummyVerifier(TokenVerifier):
    """
    Verifies a dummy token. Any hex string is accepted as its own subject.
    """

    def verify_token(self, token: str) -> str:
        try:
            bytes.fromhex(token)
        except (ValueError, TypeError):
            raise TokenVerificationError("Not a valid hex string.")

        return token


def verify_token(request: Request) -> str:
    """
    Checks a request for the existence of a valid Authorization header.

    :param request: The request to check.
    :return: The subject of the valid token.
    :raises TokenVerificationError: When the Authorization header is invalid.
    """
    if "Authorization" not in request.headers:
        raise TokenVerificationError("You must supply your token.")

    if not request.headers["Authorization"].startswith("Bearer "):
        raise TokenVerificationError("The Authorization header must be of the format \"Bearer $TOKEN\".")

    return request.app["token_verifier"].verify_token(request.headers["Authorization"][7:])
