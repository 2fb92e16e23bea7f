from __future__ import annotations

import threading

from pdv.auth import (
    CANCELLED_MESSAGE,
    EMPTY_PASSWORD_MESSAGE,
    INCORRECT_PASSWORD_MESSAGE,
    AuthGate,
    CancelToken,
)
from pdv.config import AUTH_STORAGE_KEY


class TestAuthGate:
    def test_empty_password(self):
        gate = AuthGate(password="1234", delay=0)
        result = gate.authenticate("   ")
        assert not result.success
        assert result.error == EMPTY_PASSWORD_MESSAGE

    def test_wrong_password(self):
        gate = AuthGate(password="1234", delay=0)
        result = gate.authenticate("0000")
        assert result.error == INCORRECT_PASSWORD_MESSAGE
        assert not gate.is_authenticated

    def test_success_persists_flag(self, storage):
        gate = AuthGate(storage, password="1234", delay=0)
        assert gate.authenticate("1234").success
        assert storage.get(AUTH_STORAGE_KEY) == "true"
        assert AuthGate(storage, password="1234").is_authenticated

    def test_logout_clears_flag(self, storage):
        gate = AuthGate(storage, password="1234", delay=0)
        gate.authenticate("1234")
        gate.logout()
        assert not gate.is_authenticated
        assert storage.get(AUTH_STORAGE_KEY) is None

    def test_cancelled_attempt_changes_nothing(self, storage):
        gate = AuthGate(storage, password="1234", delay=30)
        token = CancelToken()
        token.cancel()

        result = gate.authenticate("1234", token)

        assert result.cancelled
        assert result.error == CANCELLED_MESSAGE
        assert not gate.is_authenticated
        assert storage.get(AUTH_STORAGE_KEY) is None

    def test_cancel_wakes_pending_attempt(self):
        gate = AuthGate(password="1234", delay=30)
        token = CancelToken()
        results = []
        worker = threading.Thread(target=lambda: results.append(gate.authenticate("1234", token)))
        worker.start()
        token.cancel()
        worker.join(timeout=5)

        assert not worker.is_alive()
        assert results[0].cancelled
