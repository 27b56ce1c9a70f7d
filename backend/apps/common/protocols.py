from typing import Any, Optional, Protocol


class CacheBackendProtocol(Protocol):
    def get(self, key: str, default: Any = None) -> Any:
        ...

    def set(self, key: str, value: Any, timeout: Optional[int] = None) -> None:
        ...

    def delete(self, key: str) -> Any:
        ...
