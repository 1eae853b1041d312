from __future__ import annotations

from enum import Enum


class SubmissionStatus(str, Enum):
    PENGAJUAN_BARU = "PENGAJUAN_BARU"
    DIPROSES = "DIPROSES"
    SELESAI = "SELESAI"
    DITOLAK = "DITOLAK"


INITIAL_STATUS = SubmissionStatus.PENGAJUAN_BARU

TRANSITIONS: dict[SubmissionStatus, frozenset[SubmissionStatus]] = {
    SubmissionStatus.PENGAJUAN_BARU: frozenset({SubmissionStatus.DIPROSES, SubmissionStatus.DITOLAK}),
    SubmissionStatus.DIPROSES: frozenset({SubmissionStatus.SELESAI, SubmissionStatus.DITOLAK}),
    SubmissionStatus.SELESAI: frozenset(),
    SubmissionStatus.DITOLAK: frozenset(),
}

STATUS_LABELS: dict[SubmissionStatus, str] = {
    SubmissionStatus.PENGAJUAN_BARU: "Pengajuan Baru",
    SubmissionStatus.DIPROSES: "Diproses",
    SubmissionStatus.SELESAI: "Selesai",
    SubmissionStatus.DITOLAK: "Ditolak",
}


class InvalidTransition(ValueError):
    def __init__(self, current: SubmissionStatus, target: SubmissionStatus) -> None:
        super().__init__(f"{current.value} -> {target.value}")
        self.current = current
        self.target = target


def parse_status(value: str | None) -> SubmissionStatus | None:
    normalized = (value or "").strip().upper()
    try:
        return SubmissionStatus(normalized)
    except ValueError:
        return None


def is_terminal(status: SubmissionStatus) -> bool:
    return not TRANSITIONS[status]


def next_status(current: SubmissionStatus, target: SubmissionStatus, *, enforce: bool = True) -> SubmissionStatus:
    if current == target:
        return current
    if enforce and target not in TRANSITIONS[current]:
        raise InvalidTransition(current, target)
    return target
