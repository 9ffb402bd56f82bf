"""Environment-style configuration source with .env support.

Store configuration is read from three layers, later layers winning:

1) the .env file (``env_file``, or ``./.env`` when not given)
2) the process environment
3) explicit overrides passed by the caller (tests, the CLI)
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Mapping, Optional

from dotenv import dotenv_values


class EnvLoader:
    """Merge .env values, OS environment variables and overrides.

    Example:
        loader = EnvLoader("/srv/app/.env")
        store_values = loader.load_prefixed("BINARY_STORE")
        store_values["DEFAULT_PROVIDER"]  # from BINARY_STORE_DEFAULT_PROVIDER
    """

    def __init__(self, env_file: Optional[Path | str] = None) -> None:
        self.env_file = Path(env_file) if env_file else None

    @property
    def path(self) -> Path:
        return self.env_file or Path.cwd() / ".env"

    def _file_values(self) -> Dict[str, str]:
        if not self.path.is_file():
            return {}
        # Keys declared without a value ("KEY" alone) come back as None
        return {key: value for key, value in dotenv_values(self.path).items() if value is not None}

    def load(self, overrides: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        """Return every variable, with overrides taking precedence."""
        merged = self._file_values()
        merged.update(os.environ)
        merged.update({key: str(value) for key, value in (overrides or {}).items()})
        return merged

    def load_prefixed(
        self, prefix: str, overrides: Optional[Mapping[str, str]] = None
    ) -> Dict[str, str]:
        """Load only the keys under ``{prefix}_``, with the prefix stripped.

        The prefix is matched case-insensitively; a trailing "_" is optional.

        Example:
            BINARY_STORE_DEFAULT_PROVIDER=local -> {"DEFAULT_PROVIDER": "local"}
        """
        marker = f"{prefix.rstrip('_').upper()}_"
        return {
            key[len(marker):]: value
            for key, value in self.load(overrides).items()
            if key.upper().startswith(marker) and len(key) > len(marker)
        }


__all__ = ["EnvLoader"]
