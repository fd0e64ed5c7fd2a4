"""Configuration helpers for router credentials."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from dotenv import find_dotenv, load_dotenv

from ..core.state import ConfigurationError


USERNAME_VAR = "USERNAME"
PASSWORD_VAR = "PASSWORD"
GATEWAY_VAR = "DEFAULT_GATEWAY"


@dataclass(frozen=True)
class RouterSettings:
    """Credentials and address of the router's web administration page."""

    username: str
    password: str = field(repr=False)
    gateway_url: str

    def __post_init__(self) -> None:
        for name, value in (
            (USERNAME_VAR, self.username),
            (PASSWORD_VAR, self.password),
            (GATEWAY_VAR, self.gateway_url),
        ):
            if not value or not value.strip():
                raise ConfigurationError(f"{name} is not defined")


def load_router_settings(
    env_file: Optional[Path] = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
) -> RouterSettings:
    """Load the router credentials from the environment.

    Values found in ``env_file`` (or a ``.env`` file discovered from the
    working directory) override variables already present in the process
    environment. Passing ``environ`` skips the ``.env`` lookup entirely and
    reads from the given mapping instead.
    """

    if environ is None:
        if env_file:
            env_path = Path(env_file).expanduser()
            if not env_path.is_file():
                raise ConfigurationError(f"Environment file not found: {env_path}")
            load_dotenv(env_path, override=True)
        else:
            load_dotenv(find_dotenv(usecwd=True), override=True)
        environ = os.environ

    def _require(name: str) -> str:
        value = environ.get(name)
        if not value or not value.strip():
            raise ConfigurationError(f"{name} is not defined")
        return value

    return RouterSettings(
        username=_require(USERNAME_VAR),
        password=_require(PASSWORD_VAR),
        gateway_url=_require(GATEWAY_VAR),
    )
