"""Lock namespace: key prefix and logical database index. Partitions one shared store between applications."""

import hashlib
import re
from dataclasses import dataclass

from kvlock.config.settings import LockSettings

NAMESPACE_INDEX_COUNT = 16


def derive_key_prefix(deployment_id: str) -> str:
    """Stable prefix from a caller-provided deployment identifier: non-word chars become '_', ':' appended."""
    if not deployment_id or not deployment_id.strip():
        raise ValueError("deployment_id must be non-empty to derive a key prefix")
    return re.sub(r"\W", "_", deployment_id.strip()) + ":"


def derive_namespace_index(prefix: str) -> int:
    """First hex digit of md5(prefix), i.e. a deterministic index in 0-15."""
    return int(hashlib.md5(prefix.encode("utf-8")).hexdigest()[0], 16)


@dataclass(frozen=True)
class LockNamespace:
    prefix: str
    index: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.index < NAMESPACE_INDEX_COUNT:
            raise ValueError(f"namespace index must be in 0-{NAMESPACE_INDEX_COUNT - 1}, got {self.index}")

    def key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def strip(self, full_key: str) -> str:
        return full_key[len(self.prefix):] if full_key.startswith(self.prefix) else full_key

    @classmethod
    def from_settings(cls, settings: LockSettings) -> "LockNamespace":
        """Explicit prefix/index win; otherwise both are derived from deployment_id."""
        prefix = settings.lock_key_prefix or derive_key_prefix(settings.deployment_id)
        index = settings.redis_db if settings.redis_db is not None else derive_namespace_index(prefix)
        return cls(prefix=prefix, index=index)
