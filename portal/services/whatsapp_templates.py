from __future__ import annotations

from typing import Any, Mapping

from portal.fsm.submission_status import STATUS_LABELS, SubmissionStatus

SUBMISSION_RECEIVED = "submission_received"

TEMPLATES: dict[str, str] = {
    SUBMISSION_RECEIVED: (
        "Halo {nama}, pengajuan layanan {jenis_layanan} Anda telah kami terima. "
        "Kode pelacakan: {tracking_code}. Status saat ini: {status_label}. "
        "Simpan kode ini untuk memantau pengajuan Anda."
    ),
    SubmissionStatus.DIPROSES.value: (
        "Halo {nama}, pengajuan {jenis_layanan} dengan kode {tracking_code} "
        "sedang diproses oleh petugas kami."
    ),
    SubmissionStatus.SELESAI.value: (
        "Halo {nama}, pengajuan {jenis_layanan} dengan kode {tracking_code} "
        "telah selesai. Terima kasih telah menggunakan layanan kami."
    ),
    SubmissionStatus.DITOLAK.value: (
        "Halo {nama}, mohon maaf, pengajuan {jenis_layanan} dengan kode {tracking_code} "
        "tidak dapat kami proses. Silakan hubungi petugas untuk informasi lebih lanjut."
    ),
}


def template_for_status(status: SubmissionStatus) -> str:
    if status == SubmissionStatus.PENGAJUAN_BARU:
        return SUBMISSION_RECEIVED
    return status.value


def render_template(template: str, variables: Mapping[str, Any]) -> str:
    if template not in TEMPLATES:
        raise KeyError(f"Template tidak dikenal: {template}")
    return TEMPLATES[template].format(**variables)


def submission_variables(submission: Any, status: SubmissionStatus) -> dict[str, Any]:
    return {
        "nama": submission.nama,
        "jenis_layanan": submission.jenis_layanan,
        "tracking_code": submission.tracking_code,
        "status": status.value,
        "status_label": STATUS_LABELS[status],
    }
