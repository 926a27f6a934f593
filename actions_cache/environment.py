"""
Session discovery from the hosting process environment.

On a CI runner the token and cache URL are exported as
``ACTIONS_RUNTIME_TOKEN`` and ``ACTIONS_CACHE_URL``. Test environments can
instead ship an encrypted ``url:::token`` pair in ``GHCACHE_TOKEN_ENC``,
decrypted with the password in ``GHCACHE_TOKEN_PW``.
"""

import os
import subprocess
from collections.abc import Mapping

import structlog

from actions_cache.exceptions import ConfigurationError
from actions_cache.session import Session

logger = structlog.get_logger(__name__)

RUNTIME_TOKEN_VAR = "ACTIONS_RUNTIME_TOKEN"
CACHE_URL_VAR = "ACTIONS_CACHE_URL"
ENCRYPTED_TOKEN_VAR = "GHCACHE_TOKEN_ENC"
TOKEN_PASSWORD_VAR = "GHCACHE_TOKEN_PW"

_OPENSSL_PASSWORD_VAR = "ACTIONS_CACHE_TOKEN_PW"
_SEPARATOR = ":::"


def decrypt_token(encrypted: str, password: str) -> tuple[str, str]:
    """
    Decrypt a ``url:::token`` fixture with openssl.

    openssl's key derivation (``enc -md sha256``) is not reproduced in
    Python; the binary is invoked instead. The password only reaches the
    child through its environment.

    Args:
        encrypted: Base64 ciphertext as produced by ``openssl enc -aes-256-cbc -a``.
        password: Decryption password.

    Returns:
        Tuple of (url, token).

    Raises:
        ConfigurationError: If openssl is missing, fails, or the plaintext
            has no separator.
    """
    try:
        result = subprocess.run(
            [
                "openssl", "enc", "-d", "-aes-256-cbc", "-a", "-A", "-salt",
                "-md", "sha256", "-pass", f"env:{_OPENSSL_PASSWORD_VAR}",
            ],
            input=encrypted.encode(),
            env={"PATH": os.environ.get("PATH", os.defpath), _OPENSSL_PASSWORD_VAR: password},
            capture_output=True,
            check=True,
        )
    except FileNotFoundError as e:
        msg = "openssl executable not found"
        raise ConfigurationError(msg) from e
    except subprocess.CalledProcessError as e:
        msg = "Failed to decrypt token"
        raise ConfigurationError(
            msg, returncode=e.returncode, stderr=e.stderr.decode(errors="replace").strip()
        ) from e

    plaintext = result.stdout.decode()
    url, sep, token = plaintext.partition(_SEPARATOR)
    if not sep:
        msg = "Invalid decrypt contents"
        raise ConfigurationError(msg)
    return url, token.strip()


def session_from_env(environ: Mapping[str, str] | None = None) -> Session | None:
    """
    Build a session from environment variables.

    Args:
        environ: Variables to read; defaults to ``os.environ``.

    Returns:
        Session, or None when the environment has no cache credentials.

    Raises:
        ConfigurationError: If credentials are present but unusable.
    """
    env = os.environ if environ is None else environ

    if (encrypted := env.get(ENCRYPTED_TOKEN_VAR)) is not None:
        logger.debug("Using encrypted token", variable=ENCRYPTED_TOKEN_VAR)
        url, token = decrypt_token(encrypted, env.get(TOKEN_PASSWORD_VAR, ""))
        return Session.from_token(token, url)

    token = env.get(RUNTIME_TOKEN_VAR)
    url = env.get(CACHE_URL_VAR)
    if token is None or url is None:
        logger.debug("No cache credentials in environment")
        return None
    return Session.from_token(token, url)
