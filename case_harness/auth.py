"""Credentials handed to tests that access repositories."""

import logging

from pydantic import SecretStr

from case_harness.models.base import Model
from case_harness.scope import TestScope

log = logging.getLogger(__name__)

DEFAULT_USERNAME = "jrandom"
DEFAULT_PASSWORD = "rayjandom"


class AuthContext(Model):
    """Opaque credential context; the harness never looks inside."""

    username: str
    password: SecretStr
    store_passwords: bool = False
    non_interactive: bool = True


def init_auth_context(scope: TestScope) -> AuthContext:
    """Create the standard non-interactive credentials for a test."""
    log.debug("Creating auth context for test %d", scope.number)
    return AuthContext(
        username=DEFAULT_USERNAME, password=SecretStr(DEFAULT_PASSWORD)
    )
