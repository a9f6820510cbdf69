import itertools
from datetime import datetime, timezone

import pytest

from spamshield.schemas.scan import ScanRecord
from spamshield.services.admin_dashboard import dashboard_stats, report_rows
from spamshield.services.report_aggregator import (
    aggregate,
    display_id,
    is_blocked,
    is_spam_label,
    parse_timestamp,
)

T1 = "2024-01-01T00:00:00Z"
T2 = "2024-01-02T00:00:00Z"
T3 = "2024-01-03T00:00:00Z"


def rec(phone, user, result, created_at=T1):
    return ScanRecord(phone_number=phone, user_id=user, result=result, created_at=created_at)


SAMPLE = [
    rec("111-1111", "u1", "Spam", T1),
    rec("222-2222", "u1", "Suspicious", T1),
    rec("111-1111", "u2", "Spam", T3),
    rec("222-2222", "u1", "Safe", T2),
    rec("333-3333", "u3", "Safe", T2),
    rec("111-1111", "u2", "Safe", T2),
]


def test_empty_input_gives_empty_mapping():
    assert aggregate([]) == {}


def test_single_record():
    out = aggregate([rec("111-1111", "u1", "Spam", "2024-01-01T00:00:00Z")])

    assert list(out) == ["111-1111"]
    s = out["111-1111"]
    assert s.report_count == 1
    assert s.distinct_reporter_count == 1
    assert s.last_reported_at == "2024-01-01T00:00:00Z"
    assert s.latest_classification == "Spam"


def test_first_classification_wins_and_last_timestamp_is_max():
    out = aggregate([
        rec("222-2222", "u1", "Suspicious", T1),
        rec("222-2222", "u1", "Safe", T2),
    ])

    s = out["222-2222"]
    assert s.report_count == 2
    assert s.distinct_reporter_count == 1
    assert s.last_reported_at == T2
    assert s.latest_classification == "Suspicious"


def test_latest_policy_tracks_newest_record():
    out = aggregate(
        [
            rec("222-2222", "u1", "Suspicious", T1),
            rec("222-2222", "u1", "Safe", T2),
        ],
        classification_policy="latest",
    )

    assert out["222-2222"].latest_classification == "Safe"
    assert out["222-2222"].last_reported_at == T2


def test_latest_policy_ignores_older_records_seen_later():
    out = aggregate(
        [
            rec("222-2222", "u1", "Safe", T2),
            rec("222-2222", "u2", "Spam", T1),
        ],
        classification_policy="latest",
    )

    assert out["222-2222"].latest_classification == "Safe"


def test_unknown_policy_is_rejected():
    with pytest.raises(ValueError):
        aggregate([], classification_policy="majority")


def test_distinct_reporters_counted():
    out = aggregate([
        rec("444-4444", "u1", "Spam"),
        rec("444-4444", "u2", "Spam"),
    ])

    assert out["444-4444"].distinct_reporter_count == 2


def test_no_phone_number_normalization():
    out = aggregate([
        rec("123-456-7890", "u1", "Spam"),
        rec("1234567890", "u1", "Spam"),
    ])

    assert set(out) == {"123-456-7890", "1234567890"}
    assert all(s.report_count == 1 for s in out.values())


def test_counts_match_input_and_invariant_holds():
    out = aggregate(SAMPLE)

    for key, summary in out.items():
        expected = sum(1 for r in SAMPLE if r.phone_number == key)
        assert summary.report_count == expected
        assert 1 <= summary.distinct_reporter_count <= summary.report_count

    assert out["111-1111"].last_reported_at == T3


def test_idempotent_and_input_untouched():
    before = [r.model_copy() for r in SAMPLE]

    assert aggregate(SAMPLE) == aggregate(SAMPLE)
    assert SAMPLE == before


def test_counts_independent_of_order():
    baseline = {
        k: (s.report_count, s.distinct_reporter_count, s.last_reported_at)
        for k, s in aggregate(SAMPLE).items()
    }

    for perm in itertools.islice(itertools.permutations(SAMPLE), 50):
        got = {
            k: (s.report_count, s.distinct_reporter_count, s.last_reported_at)
            for k, s in aggregate(perm).items()
        }
        assert got == baseline


def test_missing_or_bad_timestamps_degrade_to_none():
    out = aggregate([
        {"phone_number": "555", "user_id": "u1", "result": "Spam", "created_at": None},
        {"phone_number": "555", "user_id": "u2", "result": "Spam", "created_at": "not a date"},
        {"phone_number": "666", "user_id": "u1", "result": "Safe", "created_at": "garbage"},
        {"phone_number": "666", "user_id": "u1", "result": "Safe", "created_at": T1},
    ])

    assert out["555"].last_reported_at is None
    assert out["555"].report_count == 2
    assert out["666"].last_reported_at == T1


def test_missing_phone_number_is_a_key():
    out = aggregate([
        {"phone_number": None, "user_id": "u1", "result": "Spam"},
        {"phone_number": "", "user_id": "u1", "result": "Spam"},
        {"user_id": "u2", "result": "Safe"},
    ])

    assert out[None].report_count == 2
    assert out[""].report_count == 1


def test_mixed_naive_and_aware_datetimes():
    naive = datetime(2024, 1, 5, 12, 0)
    aware = datetime(2024, 1, 5, 11, 0, tzinfo=timezone.utc)

    out = aggregate([
        {"phone_number": "777", "user_id": "u1", "result": "Spam", "created_at": aware},
        {"phone_number": "777", "user_id": "u1", "result": "Spam", "created_at": naive},
    ])

    assert out["777"].last_reported_at == naive


def test_parse_timestamp():
    assert parse_timestamp("2024-01-01T00:00:00Z") == datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert parse_timestamp("2024-01-01 10:00:00+02:00").utcoffset().total_seconds() == 7200
    assert parse_timestamp("yesterday") is None
    assert parse_timestamp("") is None
    assert parse_timestamp(12345) is None


def test_parse_postgres_style_timestamps():
    expected = datetime(2024, 5, 6, 7, 8, 30, 123450, tzinfo=timezone.utc)
    assert parse_timestamp("2024-05-06T07:08:30.12345+00:00") == expected
    assert parse_timestamp("2024-05-06 07:08:30.12345+00") == expected
    assert parse_timestamp("2024-05-06 07:08:30.1234567+0000") == datetime(
        2024, 5, 6, 7, 8, 30, 123456, tzinfo=timezone.utc
    )
    assert parse_timestamp("2024-05-06T07:08:30-05").utcoffset().total_seconds() == -5 * 3600
    assert parse_timestamp("2024-05-06") == datetime(2024, 5, 6, tzinfo=timezone.utc)

    out = aggregate(
        [
            {"phone_number": "999", "user_id": "u1", "created_at": "2024-05-06 07:08:30.12345+00"},
            {"phone_number": "999", "user_id": "u2", "created_at": "2024-05-06 07:08:29.9+00"},
        ]
    )
    assert out["999"].last_reported_at == "2024-05-06 07:08:30.12345+00"


def test_presentation_rules():
    assert display_id("(123) 456-7890") == "1234567890"
    assert display_id(None) == ""

    out = aggregate([rec("888", f"u{i}", "Spam") for i in range(6)])
    assert is_blocked(out["888"], threshold=5)
    assert not is_blocked(out["888"], threshold=6)

    assert is_spam_label("Likely SPAM")
    assert not is_spam_label("Safe")
    assert not is_spam_label(None)


def test_report_rows_and_stats():
    summaries = aggregate(SAMPLE)

    rows = report_rows(summaries, block_threshold=2, search="111")
    assert len(rows) == 1
    assert rows[0]["id"] == "1111111"
    assert rows[0]["report_count"] == 3
    assert rows[0]["reported_by"] == 2
    assert rows[0]["blocked"] is True
    assert rows[0]["classification"] == "Spam"

    assert dashboard_stats(summaries, total_users=3) == {
        "total_users": 3,
        "total_scans": 6,
        "unique_numbers": 3,
        "spam_detected": 1,
    }
    assert dashboard_stats(summaries, total_users=3, total_scans=10)["total_scans"] == 10
