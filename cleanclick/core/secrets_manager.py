import logging
import os
from pathlib import Path
from typing import Any, Dict

import yaml
from cryptography.fernet import Fernet, InvalidToken
from dotenv import load_dotenv

load_dotenv(".env")

logger = logging.getLogger(__name__)


class SecretManager:
    _instance = None
    _config: Dict[str, Any] = {}
    _secrets: Dict[str, Any] = {}

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(SecretManager, cls).__new__(cls)
            cls._instance._config = {}
            cls._instance._secrets = {}
            cls._instance._load_config()
        return cls._instance

    def _load_config(self) -> None:
        """
        Load configuration from ``{ENVIRONMENT}-config.yml``.
        Values under ``secrets:`` are Fernet tokens decrypted with MASTER_KEY.
        """
        env = os.getenv("ENVIRONMENT", "local")
        path = Path(os.getenv("CONFIG_FILE", f"{env}-config.yml"))

        if not path.exists():
            logger.debug("Config file %s not found, using environment only", path)
            return

        with open(path, "r") as f:
            self._config = yaml.safe_load(f) or {}

        # Plain values may sit at the top level or under a ``config:`` section.
        self._config.update(self._config.pop("config", None) or {})
        encrypted = self._config.pop("secrets", None) or {}
        key = os.getenv("MASTER_KEY")
        if encrypted and not key:
            logger.warning("MASTER_KEY not set, secrets in %s cannot be decrypted", path)
            return

        if encrypted:
            cipher = Fernet(key.encode())
            for k, v in encrypted.items():
                try:
                    self._secrets[k] = cipher.decrypt(str(v).encode()).decode()
                except InvalidToken:
                    logger.error("Failed to decrypt secret %s", k)

    def get(self, key: str, default: Any = None) -> Any:
        # Check decrypted secrets first
        if key in self._secrets:
            return self._secrets[key]

        # Check non-secret config
        if key in self._config:
            return self._config.get(key)

        # Check environment variables as fallback
        return os.getenv(key, default)

    @property
    def all_values(self) -> Dict[str, Any]:
        return {**self._config, **self._secrets}


# Global instance
secrets = SecretManager()
