from contextvars import ContextVar
from typing import Any, Generic, TypeVar, cast

from hub_digest.client import HubClient

T = TypeVar("T")


class StrictContextVar(Generic[T]):
    _UNSET = object()

    def __init__(self, name: str) -> None:
        self.exception = LookupError(f"Context variable '{name}' is not set")
        self.__var: ContextVar[T] = ContextVar(name)

    def get(self) -> T:
        value: Any = self.__var.get(self._UNSET)
        if value is self._UNSET:
            raise self.exception
        return cast(T, value)

    def set(self, value: T) -> None:
        self.__var.set(value)


CLIENT: StrictContextVar[HubClient] = StrictContextVar("CLIENT")
