import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

from colorama import Fore, Style, init

init(autoreset=True)

SYSTEM_SESSION = "system"


class InterviewLogger:
    def __init__(self, log_dir: str = "logs"):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self._sessions: Dict[str, Dict[str, Any]] = {}
        self._setup_logger()

    def _setup_logger(self):
        logger = logging.getLogger("rehearsal.events")
        logger.setLevel(logging.INFO)
        if not logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            formatter = logging.Formatter('%(message)s')
            handler.setFormatter(formatter)
            logger.addHandler(handler)
            logger.propagate = False
        self.logger = logger

    def _get_color(self, component: str) -> str:
        colors = {
            "Intake": Fore.YELLOW,
            "Gateway": Fore.CYAN,
            "Session": Fore.GREEN,
            "Scoring": Fore.MAGENTA,
            "Report": Fore.BLUE,
            "System": Fore.WHITE
        }
        return colors.get(component, Fore.WHITE)

    def _new_log_data(self, session_id: str) -> Dict[str, Any]:
        return {
            "session_id": session_id,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "role": "",
            "company": "",
            "events": [],
            "transitions": [],
            "outcome": None,
            "metrics": {
                "latency_ms": []
            }
        }

    def _log_file(self, session_id: str) -> Path:
        return self.log_dir / f"session_{session_id}.json"

    def start_session(self, session_id: str, role: str = "", company: str = "") -> None:
        log_data = self._data_for(session_id)
        log_data["role"] = role
        log_data["company"] = company
        self._save_log(session_id)

    def _data_for(self, session_id: str | None) -> Dict[str, Any]:
        key = session_id or SYSTEM_SESSION
        if key not in self._sessions:
            self._sessions[key] = self._new_log_data(key)
        return self._sessions[key]

    def log(self, component: str, message: str, data: Dict[str, Any] | None = None,
            session_id: str | None = None):
        timestamp = datetime.now(timezone.utc)
        color = self._get_color(component)

        log_entry = {
            "timestamp": timestamp.isoformat(),
            "component": component,
            "message": message,
            "data": data or {}
        }
        self._data_for(session_id)["events"].append(log_entry)

        prefix = f"[LOG :: {component.upper()}]"
        if session_id:
            prefix += f" [{session_id}]"
        formatted_msg = f"{color}{prefix}{Style.RESET_ALL} {message}"
        if data:
            formatted_msg += f" | Data: {json.dumps(data, ensure_ascii=False, default=str)}"

        self.logger.info(formatted_msg)
        if session_id:
            self._save_log(session_id)

    def log_state_transition(self, session_id: str, from_state: str, to_state: str, reason: str = ""):
        self._data_for(session_id)["transitions"].append({
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "from": from_state,
            "to": to_state,
            "reason": reason
        })
        self.log("Session", f"State transition: {from_state} → {to_state}", {"reason": reason}, session_id)

    def log_latency(self, latency_ms: float, session_id: str | None = None, component: str = "System"):
        self._data_for(session_id)["metrics"]["latency_ms"].append(latency_ms)
        self.log(component, f"[METRIC :: LATENCY] {latency_ms:.2f}ms", session_id=session_id)

    def record_outcome(self, session_id: str, outcome: Dict[str, Any]):
        self._data_for(session_id)["outcome"] = outcome
        self._save_log(session_id)

    def _save_log(self, session_id: str):
        try:
            with open(self._log_file(session_id), 'w', encoding='utf-8') as f:
                json.dump(self._sessions[session_id], f, ensure_ascii=False, indent=2, default=str)
        except OSError as e:
            self.logger.warning(f"Error saving log for {session_id}: {e}")

    def get_log_data(self, session_id: str) -> Dict[str, Any] | None:
        log_data = self._sessions.get(session_id)
        if log_data is None:
            return None
        return json.loads(json.dumps(log_data, default=str))

    def discard(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)
