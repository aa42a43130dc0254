"""End-to-end tests for the journal build CLI (build_field_journal_v1.py)."""

import json

import docx
import pytest

import build_field_journal_v1 as bfj


def _argv(tmp_path, data, photos, *extra):
    return [
        "--data",
        str(data),
        "--photos",
        str(photos),
        "--output",
        str(tmp_path / "journal.docx"),
        "--logs-dir",
        str(tmp_path / "Logs"),
        *extra,
    ]


def test_minimal_record_with_missing_legacy_image(tmp_path, write_record):
    photos = tmp_path / "photos"
    photos.mkdir()
    data = write_record({"tripTitle": "T", "days": [{"day": 1, "title": "D1", "description": "desc", "image": "ghost.jpg"}]})

    bfj.main(_argv(tmp_path, data, photos))

    out = tmp_path / "journal.docx"
    assert out.exists()
    texts = [p.text for p in docx.Document(str(out)).paragraphs]
    assert "1: D1" in texts
    assert "[MISSING IMAGE: ghost.jpg]" in texts
    assert (tmp_path / "Logs" / "build_field_journal_v1.log").exists()


def test_full_build_logs_audit_and_success(tmp_path, write_record, sample_raw, photo_dir, caplog):
    sample_raw["days"][1]["image"] = "lost.jpg"
    data = write_record(sample_raw)

    bfj.main(_argv(tmp_path, data, photo_dir))

    assert "MISSING: lost.jpg (Day 2)" in caplog.text
    assert "AUDIT COMPLETE: 1 missing." in caplog.text
    assert "BUILD SUCCESS" in caplog.text


def test_missing_data_file_exits_nonzero(tmp_path):
    with pytest.raises(SystemExit) as exc:
        bfj.main(_argv(tmp_path, tmp_path / "absent.json", tmp_path))
    assert exc.value.code == 1
    assert not (tmp_path / "journal.docx").exists()


def test_malformed_json_exits_nonzero(tmp_path):
    data = tmp_path / "travelData.json"
    data.write_text("{ not json", encoding="utf-8")

    with pytest.raises(SystemExit) as exc:
        bfj.main(_argv(tmp_path, data, tmp_path))
    assert exc.value.code == 1
    assert not (tmp_path / "journal.docx").exists()


def test_missing_required_field_exits_nonzero(tmp_path, write_record):
    data = write_record({"days": []})

    with pytest.raises(SystemExit):
        bfj.main(_argv(tmp_path, data, tmp_path))


def test_config_from_args_overrides(tmp_path):
    args = bfj.parse_args(
        [
            "--data",
            str(tmp_path / "d.json"),
            "--photos",
            str(tmp_path / "p"),
            "--output",
            str(tmp_path / "o.docx"),
            "--header",
            "DRAFT",
            "--no-regional-context",
            "--no-map-links",
        ]
    )

    config = bfj.config_from_args(args)

    assert config.data_path == tmp_path / "d.json"
    assert config.photo_dir == tmp_path / "p"
    assert config.output_path == tmp_path / "o.docx"
    assert config.header_text == "DRAFT"
    assert config.include_regional_context is False
    assert config.link_coordinates is False


def test_open_flag_hands_file_to_viewer(tmp_path, write_record, monkeypatch):
    opened = []
    monkeypatch.setattr(bfj, "open_in_viewer", opened.append)
    data = write_record({"tripTitle": "T", "days": []})

    bfj.main(_argv(tmp_path, data, tmp_path, "--open"))

    assert opened == [tmp_path / "journal.docx"]


def test_rerun_produces_same_document_structure(tmp_path, write_record, sample_raw, photo_dir):
    data = write_record(sample_raw)

    bfj.main(_argv(tmp_path, data, photo_dir))
    first = [(p.style.name, p.text) for p in docx.Document(str(tmp_path / "journal.docx")).paragraphs]
    bfj.main(_argv(tmp_path, data, photo_dir))
    second = [(p.style.name, p.text) for p in docx.Document(str(tmp_path / "journal.docx")).paragraphs]

    assert first == second
    assert json.loads(data.read_text(encoding="utf-8")) == sample_raw


def test_unusable_logs_dir_exits_nonzero(tmp_path, write_record, capsys):
    data = write_record({"tripTitle": "T", "days": []})
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("x", encoding="utf-8")
    argv = _argv(tmp_path, data, tmp_path)
    argv[argv.index("--logs-dir") + 1] = str(blocker)

    with pytest.raises(SystemExit) as exc:
        bfj.main(argv)

    assert exc.value.code == 1
    assert "BUILD FAILED" in capsys.readouterr().err
    assert not (tmp_path / "journal.docx").exists()
