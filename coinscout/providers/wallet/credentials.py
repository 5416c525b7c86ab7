import logging
from pathlib import Path
from typing import Optional, Union


class CredentialStore:
    """Flat-file persistence for exported wallet data, treated as opaque bytes."""

    def __init__(self, path: Union[str, Path], logger: Optional[logging.Logger] = None):
        self.path = Path(path)
        self.logger = logger or logging.getLogger(__name__)

    def load_credentials(self) -> Optional[bytes]:
        if not self.path.exists():
            return None
        try:
            data = self.path.read_bytes()
        except OSError as exc:
            self.logger.error("Error reading wallet data from %s: %s", self.path, exc)
            return None
        return data or None

    def save_credentials(self, data: bytes) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_bytes(data)
        self.logger.info("Wallet data saved to %s", self.path)
