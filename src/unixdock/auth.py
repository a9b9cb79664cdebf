"""
Registry authentication header
"""

import base64

from pydantic import BaseModel

REGISTRY_AUTH_HEADER = 'X-Registry-Auth'


class AuthHeader(BaseModel):
    """
    Credentials sent to the engine for registry operations

    Push only fills serveraddress; the engine then uses whatever
    credentials it already holds for that registry.
    """

    username: str = ''
    password: str = ''
    email: str = ''
    serveraddress: str = ''

    def encode(self) -> str:
        """Base64 of the JSON document, as the header value"""
        return base64.b64encode(self.model_dump_json().encode('utf-8')).decode('ascii')

    @classmethod
    def decode(cls, value: str) -> 'AuthHeader':
        return cls.model_validate_json(base64.b64decode(value))
