"""
Password hashing implementation using PBKDF2-HMAC.

A credential is the base64 encoding of a 32-byte PBKDF2 key together with
the 16-byte random salt it was derived from. Each credential is tagged with
a scheme such as ``pbkdf2-sha256:10000`` so the PRF and iteration count can
be raised later without breaking verification of existing records.
"""
import base64
import hashlib
import hmac
import logging
import secrets
from typing import Optional, Tuple

from ...application.interfaces.services import KeyDerivation, PasswordHasher
from ...config import PasswordHashingSettings
from ...domain.exceptions import CryptoUnavailableException, InvalidArgumentException
from ...domain.value_objects import HashedPassword

logger = logging.getLogger(__name__)

SALT_SIZE = 16  # 128 bits
KEY_SIZE = 32  # 256 bits
DEFAULT_PRF = 'sha256'
DEFAULT_ITERATIONS = 10000

SCHEME_PREFIX = 'pbkdf2-'

# Records written before schemes were stored were all derived this way.
LEGACY_SCHEME = f'{SCHEME_PREFIX}{DEFAULT_PRF}:{DEFAULT_ITERATIONS}'


def format_scheme(prf: str, iterations: int) -> str:
    """Build the scheme tag for a PRF and iteration count."""
    return f'{SCHEME_PREFIX}{prf}:{iterations}'


def parse_scheme(scheme: str) -> Tuple[str, int]:
    """
    Split a scheme tag into ``(prf, iterations)``.

    Raises:
        InvalidArgumentException: If the tag is not of the form
            ``pbkdf2-<prf>:<iterations>``.
    """
    if not isinstance(scheme, str) or not scheme.startswith(SCHEME_PREFIX):
        raise InvalidArgumentException('scheme', f"Unknown password scheme: {scheme!r}")

    prf, sep, iterations = scheme[len(SCHEME_PREFIX):].partition(':')
    if not sep or not prf or not iterations.isdigit() or int(iterations) < 1:
        raise InvalidArgumentException('scheme', f"Malformed password scheme: {scheme!r}")

    return prf, int(iterations)


class HashlibKeyDerivation(KeyDerivation):
    """Key derivation backed by ``secrets`` and ``hashlib.pbkdf2_hmac``."""

    def generate_salt(self, size: int) -> bytes:
        try:
            return secrets.token_bytes(size)
        except (NotImplementedError, OSError) as exc:
            logger.critical("Secure random source unavailable: %s", exc)
            raise CryptoUnavailableException(original_error=str(exc)) from exc

    def derive_key(
        self,
        password: str,
        salt: bytes,
        iterations: int,
        prf: str,
        key_size: int,
    ) -> bytes:
        try:
            password_bytes = password.encode('utf-8')
        except UnicodeEncodeError as exc:
            raise InvalidArgumentException('password', "Password is not valid UTF-8 text") from exc

        try:
            return hashlib.pbkdf2_hmac(prf, password_bytes, salt, iterations, dklen=key_size)
        except ValueError as exc:
            # hashlib reports unsupported digests as ValueError
            raise InvalidArgumentException('prf', f"Unsupported PRF: {prf}") from exc


class Pbkdf2PasswordHasher(PasswordHasher):
    """PBKDF2 implementation of password hasher."""

    def __init__(
        self,
        iterations: int = DEFAULT_ITERATIONS,
        prf: str = DEFAULT_PRF,
        key_derivation: Optional[KeyDerivation] = None,
    ):
        """
        Initialize hasher with derivation parameters.

        Args:
            iterations: PBKDF2 iteration count for new credentials
            prf: hashlib digest name used as the HMAC PRF
            key_derivation: Salt and key source (hashlib-backed by default)
        """
        if iterations < 1:
            raise InvalidArgumentException('iterations', "Iteration count must be positive")

        self._iterations = iterations
        self._prf = prf
        self._kdf = key_derivation or HashlibKeyDerivation()

    @classmethod
    def from_settings(
        cls,
        settings: PasswordHashingSettings,
        key_derivation: Optional[KeyDerivation] = None,
    ) -> 'Pbkdf2PasswordHasher':
        """Create a hasher from configuration."""
        return cls(
            iterations=settings.iterations,
            prf=settings.prf,
            key_derivation=key_derivation,
        )

    @property
    def scheme(self) -> str:
        return format_scheme(self._prf, self._iterations)

    def hash_password(self, password: str) -> HashedPassword:
        """Derive a credential for ``password`` with a fresh random salt."""
        self._check_password(password)

        salt = self._kdf.generate_salt(SALT_SIZE)
        digest = self._derive(password, salt, self._prf, self._iterations)
        return HashedPassword(digest=digest, salt=salt)

    def verify_password(
        self,
        password: str,
        digest: str,
        salt: bytes,
        scheme: Optional[str] = None,
    ) -> bool:
        """
        Re-derive with the stored salt and compare against ``digest``.

        A wrong password yields ``False``. A salt that is not 16 bytes, a
        non-string digest or an unknown scheme raises
        ``InvalidArgumentException``.
        """
        self._check_password(password)
        if not isinstance(digest, str):
            raise InvalidArgumentException('digest', "Stored digest must be a string")
        if not isinstance(salt, (bytes, bytearray, memoryview)):
            raise InvalidArgumentException('salt', "Salt must be a byte sequence")
        salt = bytes(salt)
        if len(salt) != SALT_SIZE:
            raise InvalidArgumentException(
                'salt',
                f"Salt must be {SALT_SIZE} bytes, got {len(salt)}"
            )

        prf, iterations = parse_scheme(scheme or LEGACY_SCHEME)
        computed = self._derive(password, salt, prf, iterations)
        return hmac.compare_digest(computed.encode('ascii'), digest.encode('utf-8'))

    def needs_rehash(self, scheme: Optional[str]) -> bool:
        return (scheme or LEGACY_SCHEME) != self.scheme

    def _derive(self, password: str, salt: bytes, prf: str, iterations: int) -> str:
        key = self._kdf.derive_key(password, salt, iterations, prf, KEY_SIZE)
        return base64.b64encode(key).decode('ascii')

    @staticmethod
    def _check_password(password: str) -> None:
        if not isinstance(password, str):
            raise InvalidArgumentException('password', "Password must be a string")
