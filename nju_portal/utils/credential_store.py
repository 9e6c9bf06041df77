"""File-backed storage for the single portal account.

The pair is kept as plain JSON in an owner-only file. Encryption at rest
belongs to whatever platform store replaces this one; this class only has to
honour the ``save``/``load``/``clear`` contract.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Optional, Tuple

from pydantic import ValidationError

from ..models import Credentials

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
DEFAULT_CREDENTIALS_PATH = os.path.join(PROJECT_ROOT, ".cache", "credentials.json")


class CredentialStore:
    """Persists one username/password pair between runs.

    The file is kept owner-readable only. Read and write failures, as well as
    files that do not hold two strings, are logged and reported as "nothing
    stored" rather than raised.
    """

    def __init__(self, path: str = DEFAULT_CREDENTIALS_PATH) -> None:
        self.path = path

    def save(self, username: str, password: str) -> None:
        try:
            os.makedirs(os.path.dirname(os.path.abspath(self.path)), exist_ok=True)
            payload = Credentials(username=username, password=password).model_dump()
            fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(payload, handle, ensure_ascii=False)
            # O_CREAT's mode is ignored for a file that already exists.
            os.chmod(self.path, 0o600)
            logging.debug("Saved credentials for %s to %s", username, self.path)
        except OSError as exc:  # pragma: no cover - io errors
            logging.warning("Unable to write credentials %s: %s", self.path, exc)

    def load(self) -> Tuple[Optional[str], Optional[str]]:
        try:
            with open(self.path, "r", encoding="utf-8") as handle:
                data = json.load(handle)
        except FileNotFoundError:
            return None, None
        except (json.JSONDecodeError, OSError) as exc:
            logging.warning("Failed to read credentials %s: %s", self.path, exc)
            return None, None
        try:
            credentials = Credentials.model_validate(data)
        except ValidationError as exc:
            logging.warning("Ignoring malformed credentials %s: %s", self.path, exc.error_count())
            return None, None
        return credentials.username or None, credentials.password or None

    def clear(self) -> None:
        try:
            if os.path.exists(self.path):
                os.remove(self.path)
                logging.info("Cleared stored credentials %s", self.path)
        except OSError as exc:  # pragma: no cover
            logging.warning("Failed to remove credentials %s: %s", self.path, exc)

    def has_valid_credentials(self) -> bool:
        username, password = self.load()
        return Credentials(username=username or "", password=password or "").is_valid
