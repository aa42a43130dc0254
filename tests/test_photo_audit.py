"""Tests for the photo audit (journal_photo_audit_v1.py)."""

import logging

from journal_config_v1 import LOG_NAME
from journal_photo_audit_v1 import MissingAsset, audit_photos, main, report_audit
from journal_record_v1 import canonicalize_record, load_record


def test_no_missing_photos(write_record, sample_raw, photo_dir):
    record = load_record(write_record(sample_raw))
    assert audit_photos(record, photo_dir) == []


def test_missing_count_includes_cover_and_duplicates(photo_dir):
    record = canonicalize_record(
        {
            "tripTitle": "T",
            "coverImage": "lost_cover.jpg",
            "days": [
                {"day": 1, "title": "a", "description": "", "images": ["gone.jpg", "andes.png", "gone.jpg"]},
                {"day": 2, "title": "b", "description": "", "image": "legacy_gone.jpg"},
            ],
        }
    )

    missing = audit_photos(record, photo_dir)

    assert len(missing) == 4
    assert missing[0] == MissingAsset("lost_cover.jpg", "COVER")
    assert missing.count(MissingAsset("gone.jpg", "Day 1")) == 2
    assert MissingAsset("legacy_gone.jpg", "Day 2") in missing


def test_report_audit_lines(caplog):
    caplog.set_level(logging.INFO, logger=LOG_NAME)
    report_audit([MissingAsset("c.jpg", "COVER"), MissingAsset("d.jpg", "Day 4")], logging.getLogger(LOG_NAME))

    text = caplog.text
    assert "COVER MISSING: c.jpg" in text
    assert "MISSING: d.jpg (Day 4)" in text
    assert "AUDIT COMPLETE: 2 missing." in text


def test_report_audit_all_located(caplog):
    caplog.set_level(logging.INFO, logger=LOG_NAME)
    report_audit([], logging.getLogger(LOG_NAME))
    assert "ALL PHOTOS LOCATED." in caplog.text


def test_main_exit_codes(tmp_path, write_record, sample_raw, photo_dir):
    data = write_record(sample_raw)
    assert main(["--data", str(data), "--photos", str(photo_dir)]) == 0

    sample_raw["coverImage"] = "missing.jpg"
    data = write_record(sample_raw, name="other.json")
    assert main(["--data", str(data), "--photos", str(photo_dir)]) == 1

    assert main(["--data", str(tmp_path / "absent.json"), "--photos", str(photo_dir)]) == 2
