"""
➡️ But : Représenter explicitement le résultat d'une opération (succès ou échec) au lieu de lever des exceptions.

Result.ok(valeur)       → succès avec une valeur
Result.fail("message")  → échec avec une liste de messages
NullResult()            → succès SANS valeur (absence volontaire, ce n'est pas une erreur)

Les handlers journalisent chaque échec avec le message exact qu'ils renvoient (log_and_fail).
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, List, Optional, Sequence, TypeVar

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Error:
    message: str

    def __str__(self) -> str:
        return self.message


class Result(Generic[T]):
    __slots__ = ("_value", "errors")

    def __init__(self, value: Optional[T] = None, errors: Sequence[Error] = ()):
        self._value = value
        self.errors: List[Error] = list(errors)

    # ---------- Constructeurs ----------

    @staticmethod
    def ok(value: Optional[T] = None) -> "Result[T]":
        return Result(value)

    @staticmethod
    def fail(*messages: str) -> "Result[Any]":
        if not messages:
            raise ValueError("A failed result needs at least one message")
        return Result(errors=[Error(m) for m in messages])

    @staticmethod
    def merge(results: Iterable["Result[T]"]) -> "Result[List[T]]":
        """Combine plusieurs résultats : toutes les erreurs, ou toutes les valeurs dans l'ordre."""
        values: List[T] = []
        errors: List[Error] = []
        for result in results:
            if result.is_failed:
                errors.extend(result.errors)
            else:
                values.append(result._value)
        if errors:
            return Result(errors=errors)
        return Result(values)

    # ---------- Lecture ----------

    @property
    def is_success(self) -> bool:
        return not self.errors

    @property
    def is_failed(self) -> bool:
        return bool(self.errors)

    @property
    def value(self) -> T:
        if self.is_failed:
            raise ValueError(f"Cannot access the value of a failed result: {self.messages}")
        return self._value

    @property
    def messages(self) -> List[str]:
        return [e.message for e in self.errors]

    def value_or(self, default: T) -> T:
        return default if self.is_failed or self._value is None else self._value

    # ---------- Composition ----------

    def map(self, fn: Callable[[T], U]) -> "Result[U]":
        if self.is_failed:
            return Result(errors=self.errors)
        return Result(fn(self._value))

    def bind(self, fn: Callable[[T], "Result[U]"]) -> "Result[U]":
        if self.is_failed:
            return Result(errors=self.errors)
        return fn(self._value)

    def __repr__(self) -> str:
        if self.is_failed:
            return f"{type(self).__name__}(errors={self.messages!r})"
        return f"{type(self).__name__}(value={self._value!r})"


class NullResult(Result[T]):
    """Succès explicite sans valeur : l'entité parente existe mais n'a rien de lié."""

    __slots__ = ()

    def __init__(self):
        super().__init__(None)

    def map(self, fn: Callable[[T], U]) -> "Result[U]":
        return NullResult()

    def bind(self, fn: Callable[[T], "Result[U]"]) -> "Result[U]":
        return NullResult()


def log_and_fail(logger: logging.Logger, request: Any, message: str) -> Result[Any]:
    """Journalise le message d'erreur puis renvoie un échec portant exactement ce message."""
    logger.error(message, extra={"request": type(request).__name__})
    return Result.fail(message)
