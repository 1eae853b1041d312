import pytest

from portal.services.submission_validator import MESSAGES, is_valid_submission, validate_submission
from tests.fixtures_data import INVALID_SUBMISSION_PAYLOAD, VALID_SUBMISSION_PAYLOAD


def test_valid_payload_has_no_errors():
    assert validate_submission(VALID_SUBMISSION_PAYLOAD) == {}
    assert is_valid_submission(VALID_SUBMISSION_PAYLOAD)


def test_empty_payload_reports_every_required_field():
    errors = validate_submission({})

    assert errors == {
        "nama": MESSAGES["nama_required"],
        "nik": MESSAGES["nik_required"],
        "email": MESSAGES["email_required"],
        "no_wa": MESSAGES["no_wa_required"],
        "jenis_layanan": MESSAGES["jenis_layanan_required"],
        "consent": MESSAGES["consent_required"],
    }


def test_format_errors_are_reported_together():
    errors = validate_submission(INVALID_SUBMISSION_PAYLOAD)

    assert errors["nama"] == "Nama lengkap wajib diisi"
    assert errors["nik"] == "NIK harus 16 digit angka"
    assert errors["email"] == "Format email tidak valid"
    assert errors["no_wa"] == "Nomor WhatsApp harus angka"
    assert errors["jenis_layanan"] == "Jenis layanan wajib dipilih"
    assert errors["consent"] == "Anda harus menyetujui pemberian notifikasi"


def test_nik_requires_exactly_sixteen_digits():
    base = dict(VALID_SUBMISSION_PAYLOAD)

    assert "nik" in validate_submission({**base, "nik": "320123456789012"})
    assert "nik" in validate_submission({**base, "nik": "32012345678901234"})
    assert "nik" in validate_submission({**base, "nik": "32012345678901AB"})
    assert "nik" not in validate_submission({**base, "nik": 3201234567890123})


def test_whitespace_only_fields_count_as_missing():
    errors = validate_submission({**VALID_SUBMISSION_PAYLOAD, "nama": "   ", "jenis_layanan": "\t"})

    assert errors == {
        "nama": MESSAGES["nama_required"],
        "jenis_layanan": MESSAGES["jenis_layanan_required"],
    }


def test_phone_with_separators_is_accepted():
    assert validate_submission({**VALID_SUBMISSION_PAYLOAD, "no_wa": "+62 812-3456-7890"}) == {}


@pytest.mark.parametrize("email", ["a@b..c", "budi@x.com.", "<x>@y.z", "budi@-.-", "budi@", "@x.com"])
def test_malformed_email_is_rejected(email):
    errors = validate_submission({**VALID_SUBMISSION_PAYLOAD, "email": email})

    assert errors == {"email": MESSAGES["email_format"]}


def test_email_check_runs_alongside_other_rules():
    errors = validate_submission({**VALID_SUBMISSION_PAYLOAD, "email": "a@b..c", "nik": "123"})

    assert set(errors) == {"email", "nik"}
