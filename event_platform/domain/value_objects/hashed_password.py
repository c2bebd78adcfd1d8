"""
Hashed password value object.
"""
from dataclasses import dataclass, field

from ..entities.base import ValueObject


@dataclass(frozen=True)
class HashedPassword(ValueObject):
    """
    A derived password digest together with the salt it was derived with.

    ``digest`` is the base64 encoding of the derived key; ``salt`` is the raw
    random bytes. Both are stored on the credential record and always replaced
    together.
    """
    digest: str
    salt: bytes = field(repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.digest, str) or not self.digest:
            raise ValueError("Digest must be a non-empty string")
        if not isinstance(self.salt, (bytes, bytearray)):
            raise ValueError("Salt must be bytes")
        object.__setattr__(self, 'salt', bytes(self.salt))
