from types import SimpleNamespace

from sqlalchemy.exc import SQLAlchemyError

from portal.core.errors import DispatchError
from portal.fsm.submission_status import SubmissionStatus
from portal.models.notification_log import NotificationLog
from portal.services.notifications import (
    DispatchResult,
    dispatch_initial,
    dispatch_submission_notification,
    list_notification_logs,
    record_notification,
)
from portal.services.submissions import create_submission
from tests.fake_channels import RecordingChannel
from tests.fixtures_data import VALID_SUBMISSION_PAYLOAD


def test_initial_dispatch_writes_success_log(db):
    submission = create_submission(db, VALID_SUBMISSION_PAYLOAD)
    channel = RecordingChannel()

    result = dispatch_initial(db, submission, channel=channel)

    assert result.success is True
    recipient, message = channel.sent[0]
    assert recipient == "6281234567890"
    assert submission.tracking_code in message
    logs = list_notification_logs(db, submission.id)
    assert len(logs) == 1
    assert logs[0].channel == "WHATSAPP"
    assert logs[0].send_status == "SUCCESS"
    assert logs[0].payload["to"] == "6281234567890"
    assert logs[0].payload["status"] == "PENGAJUAN_BARU"
    assert logs[0].payload["result"]["success"] is True


def test_rejected_message_is_logged_as_failed(db):
    submission = create_submission(db, VALID_SUBMISSION_PAYLOAD)

    result = dispatch_initial(db, submission, channel=RecordingChannel(success=False))

    assert result.success is False
    assert list_notification_logs(db, submission.id)[0].send_status == "FAILED"


def test_raising_channel_is_recovered_and_logged(db):
    submission = create_submission(db, VALID_SUBMISSION_PAYLOAD)
    channel = RecordingChannel(error=DispatchError("WhatsApp timeout after 10s"))

    result = dispatch_initial(db, submission, channel=channel)

    assert result.success is False
    log = list_notification_logs(db, submission.id)[0]
    assert log.send_status == "FAILED"
    assert log.payload["result"]["providerResponse"]["error"] == "WhatsApp timeout after 10s"


def test_unexpected_channel_exception_is_recovered(db):
    submission = create_submission(db, VALID_SUBMISSION_PAYLOAD)

    result = dispatch_initial(db, submission, channel=RecordingChannel(error=ConnectionResetError("reset")))

    assert result.success is False
    assert db.query(NotificationLog).count() == 1


def test_status_dispatch_uses_status_template(db):
    submission = create_submission(db, VALID_SUBMISSION_PAYLOAD)
    channel = RecordingChannel()

    dispatch_submission_notification(db, submission, status=SubmissionStatus.DITOLAK, channel=channel)

    assert "tidak dapat kami proses" in channel.sent[0][1]
    assert list_notification_logs(db, submission.id)[0].payload["status"] == "DITOLAK"


class _FailingDb:
    def __init__(self):
        self.rolled_back = False

    def add(self, _entry):
        return None

    def commit(self):
        raise SQLAlchemyError("disk I/O error")

    def rollback(self):
        self.rolled_back = True


def test_log_write_failure_is_swallowed():
    failing_db = _FailingDb()

    entry = record_notification(
        failing_db,
        submission_id="sub-1",
        recipient="6281234567890",
        status=SubmissionStatus.PENGAJUAN_BARU,
        dispatch=DispatchResult(success=True, provider_response={"message_id": "x"}),
    )

    assert entry is None
    assert failing_db.rolled_back is True


def test_dispatch_survives_log_write_failure():
    submission = SimpleNamespace(
        id="sub-1",
        tracking_code="WS-1-AAAAAA",
        nama="Budi Santoso",
        jenis_layanan="KTP",
        no_wa="6281234567890",
        status="PENGAJUAN_BARU",
    )

    result = dispatch_initial(_FailingDb(), submission, channel=RecordingChannel())

    assert result.success is True
