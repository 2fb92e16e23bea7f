"""Password gate in front of the sales report."""

from __future__ import annotations

import threading
from dataclasses import dataclass

from pdv.config import AUTH_STORAGE_KEY, LOGIN_DELAY_SECONDS, REPORT_PASSWORD
from pdv.debug_log import log_debug
from pdv.persistence import KeyValueStorage
from pdv.stores import STORAGE_ERRORS

EMPTY_PASSWORD_MESSAGE = "Por favor, digite a senha"
INCORRECT_PASSWORD_MESSAGE = "Senha incorreta. Tente novamente."
CANCELLED_MESSAGE = "Autenticação cancelada"


class CancelToken:
    """Cancellation signal for a pending login; cancelling wakes the waiter at once."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, seconds: float) -> bool:
        """Sleep up to ``seconds``; return True if cancelled meanwhile."""
        return self._event.wait(seconds)


@dataclass(frozen=True)
class AuthResult:
    success: bool
    error: str | None = None
    cancelled: bool = False


class AuthGate:
    def __init__(
        self,
        storage: KeyValueStorage | None = None,
        password: str = REPORT_PASSWORD,
        delay: float = LOGIN_DELAY_SECONDS,
    ) -> None:
        self.storage = storage
        self.password = password
        self.delay = delay
        self.error: str | None = None
        self._authenticated = self._load_flag()

    @property
    def is_authenticated(self) -> bool:
        return self._authenticated

    def authenticate(self, password: str, cancel: CancelToken | None = None) -> AuthResult:
        if not password.strip():
            self.error = EMPTY_PASSWORD_MESSAGE
            return AuthResult(success=False, error=EMPTY_PASSWORD_MESSAGE)

        cancel = cancel or CancelToken()
        if cancel.wait(self.delay):
            log_debug("auth_cancelled")
            return AuthResult(success=False, error=CANCELLED_MESSAGE, cancelled=True)

        if password != self.password:
            self.error = INCORRECT_PASSWORD_MESSAGE
            return AuthResult(success=False, error=INCORRECT_PASSWORD_MESSAGE)

        self.error = None
        self._set_flag(True)
        return AuthResult(success=True)

    def logout(self) -> None:
        self._set_flag(False)

    def _load_flag(self) -> bool:
        if self.storage is None:
            return False
        try:
            return self.storage.get(AUTH_STORAGE_KEY) == "true"
        except STORAGE_ERRORS as exc:
            self.error = "Erro ao verificar autenticação"
            log_debug(f"auth_load_failed error={exc!r}")
            return False

    def _set_flag(self, value: bool) -> None:
        self._authenticated = value
        if self.storage is None:
            return
        try:
            if value:
                self.storage.set(AUTH_STORAGE_KEY, "true")
            else:
                self.storage.clear(AUTH_STORAGE_KEY)
        except STORAGE_ERRORS as exc:
            self.error = "Erro ao salvar autenticação"
            log_debug(f"auth_save_failed error={exc!r}")
