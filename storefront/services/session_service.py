# storefront/services/session_service.py
import re
import uuid

_SESSION_ID_RE = re.compile(r"^[A-Za-z0-9_-]{8,64}$")


class SessionService:
    """Anonimowy identyfikator sesji, klucz koszyka przed zalogowaniem."""

    @staticmethod
    def is_valid(session_id: str | None) -> bool:
        return bool(session_id) and bool(_SESSION_ID_RE.match(session_id))

    @staticmethod
    def new_session_id() -> str:
        return str(uuid.uuid4())

    def get_or_create_session_id(self, existing: str | None) -> tuple[str, bool]:
        """Zwraca (session_id, czy_nowy). Istniejacy poprawny id wraca bez zmian."""
        if self.is_valid(existing):
            return existing, False
        return self.new_session_id(), True
