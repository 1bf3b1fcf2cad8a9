import json
import logging
import os
from pathlib import Path

from nethermind.pairscope.exceptions import CredentialError

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("pairscope").getChild("credentials")

KNOWN_CREDENTIALS = ("etherscan", "coingecko", "thegraph")


def default_credentials_path() -> Path:
    """
    Returns the path of the credential cache.  The cache lives in ``$PAIRSCOPE_HOME``, which defaults
    to ``~/.pairscope``
    """
    home = os.environ.get("PAIRSCOPE_HOME")
    base_dir = Path(home) if home else Path.home() / ".pairscope"
    return base_dir / "credentials.json"


class CredentialStore:
    """
    Local key/value cache for user-supplied API keys.

    Keys are stored unencrypted in a JSON file readable only by the current user.  The cache is read from disk
    on every access so that multiple CLI invocations see each other's writes.
    """

    path: Path

    def __init__(self, path: Path | str | None = None):
        self.path = Path(path) if path else default_credentials_path()

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as cred_file:
                stored = json.load(cred_file)
        except (OSError, json.JSONDecodeError) as exc:
            raise CredentialError(f"Could not read credential cache at {self.path}") from exc

        if not isinstance(stored, dict) or not all(isinstance(val, str) for val in stored.values()):
            raise CredentialError(f"Credential cache at {self.path} is corrupted.  Remove the file and re-add keys")
        return stored

    def _write(self, credentials: dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as cred_file:
                json.dump(credentials, cred_file, indent=2, sort_keys=True)
            os.chmod(self.path, 0o600)
        except OSError as exc:
            raise CredentialError(f"Could not write credential cache at {self.path}") from exc

    @staticmethod
    def _check_name(name: str) -> None:
        if name not in KNOWN_CREDENTIALS:
            raise CredentialError(f"Unknown credential '{name}'.  Valid credentials are {list(KNOWN_CREDENTIALS)}")

    def get(self, name: str) -> str | None:
        """
        Returns the stored key for name, or None if no key is stored

        :param name: one of ``etherscan``, ``coingecko``, ``thegraph``
        """
        self._check_name(name)
        return self._read().get(name)

    def set(self, name: str, value: str) -> None:
        """Stores a key, replacing any existing key with the same name"""
        self._check_name(name)
        if not value:
            raise CredentialError("Cannot store an empty API key")
        credentials = self._read()
        credentials[name] = value
        self._write(credentials)
        logger.info(f"Stored {name} API key in {self.path}")

    def remove(self, name: str) -> bool:
        """
        Removes a stored key.

        :return: True if a key was removed, False if no key was stored
        """
        self._check_name(name)
        credentials = self._read()
        if name not in credentials:
            return False
        del credentials[name]
        self._write(credentials)
        return True

    def names(self) -> list[str]:
        """Returns the names of all stored keys"""
        return sorted(self._read().keys())
