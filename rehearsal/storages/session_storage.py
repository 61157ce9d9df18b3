from typing import Dict, List

from rehearsal.core.session import Session


class SessionStorage:
    def __init__(self):
        self._sessions: Dict[str, Session] = {}

    def save(self, session: Session) -> None:
        self._sessions[session.session_id] = session

    def get(self, session_id: str) -> Session | None:
        return self._sessions.get(session_id)

    def delete(self, session_id: str) -> None:
        if session_id in self._sessions:
            del self._sessions[session_id]

    def ids(self) -> List[str]:
        return list(self._sessions.keys())
