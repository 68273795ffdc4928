from __future__ import annotations

import logging
import string
from typing import Any

from poddiag.config import Settings, load_settings
from poddiag.core.errors import HexParseError, StatusDecodeError
from poddiag.core.faults import DEFAULT_CLASSIFIER, FaultClassifier
from poddiag.core.format import debug_description
from poddiag.core.reference import fault_is_present, ref_category, reference_code
from poddiag.core.status import DetailedStatus, decode_detailed_status


log = logging.getLogger(__name__)


def parse_hex(value: str | bytes | bytearray) -> bytes:
    """Accept raw bytes or a hex string (spaces, colons and a 0x prefix allowed)."""

    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if not isinstance(value, str):
        raise HexParseError("payload must be a hex string")
    raw = value.strip()
    if raw.lower().startswith("0x"):
        raw = raw[2:]
    raw = "".join(ch for ch in raw if ch not in " \t\r\n:-")
    if not raw:
        raise HexParseError("payload is empty")
    if any(ch not in string.hexdigits for ch in raw):
        raise HexParseError("payload must be hex")
    if len(raw) % 2:
        raise HexParseError("payload has an odd number of hex digits")
    return bytes.fromhex(raw)


class StatusService:
    """Decode API shared by the CLI and the TUI."""

    def __init__(self, settings: Settings | None = None, *, classifier: FaultClassifier = DEFAULT_CLASSIFIER) -> None:
        self._settings = settings or load_settings()
        self._classifier = classifier

    @property
    def settings(self) -> Settings:
        return self._settings

    def decode_status(self, payload: str | bytes | bytearray) -> DetailedStatus:
        data = parse_hex(payload)
        return decode_detailed_status(data, constants=self._settings.constants, classifier=self._classifier)

    def reference(self, status: DetailedStatus) -> str | None:
        return reference_code(status, label=self._settings.ref_label)

    def decode(self, payload: str | bytes | bytearray) -> dict[str, Any]:
        try:
            status = self.decode_status(payload)
        except (HexParseError, StatusDecodeError) as exc:
            log.warning("Decode failed", extra={"error": str(exc), "error_kind": type(exc).__name__})
            return {"ok": False, "error": str(exc), "error_kind": type(exc).__name__}

        faulted = fault_is_present(status)
        ref = self.reference(status)
        log.info(
            "Decoded detailed status",
            extra={"faulted": faulted, "fault_code": f"{status.fault_event_code.raw_value:02X}", "ref": ref},
        )
        return {
            "ok": True,
            "status": status.to_dict(),
            "faulted": faulted,
            "ref": ref,
            "ref_category": ref_category(status.fault_event_code.fault_type).name if ref is not None else None,
            "report": debug_description(status),
        }
