import json

import pytest

from hl7codec.cli import run_cli


@pytest.fixture
def sample_file(tmp_path, mdm_sample):
    path = tmp_path / "sample.hl7"
    path.write_text(mdm_sample)
    return path


def test_cli_outputs_json_tree(sample_file, capsys):
    run_cli(["-i", str(sample_file)])

    tree = json.loads(capsys.readouterr().out)
    assert tree["MSH"]["9"]["1"] == "MDM"
    assert len(tree["OBX"]) == 2


def test_cli_table_output(sample_file, capsys):
    run_cli(["-i", str(sample_file), "--table"])

    rows = json.loads(capsys.readouterr().out)
    assert rows[0]["field_name"] == "Field Separator"


def test_cli_canonical_output(sample_file, tmp_path, mdm_sample):
    out = tmp_path / "out.hl7"

    run_cli(["-i", str(sample_file), "--canonical", "-o", str(out)])

    assert out.read_bytes().decode() == mdm_sample.replace("\n", "\r")


def test_cli_validate_only_passes(sample_file):
    with pytest.raises(SystemExit) as exc:
        run_cli(["-i", str(sample_file), "--validate-only"])
    assert exc.value.code == 0


def test_cli_validate_only_fails_without_txa(tmp_path, mdm_sample):
    path = tmp_path / "no_txa.hl7"
    path.write_text("\n".join(l for l in mdm_sample.split("\n") if not l.startswith("TXA")))

    with pytest.raises(SystemExit) as exc:
        run_cli(["-i", str(path), "--validate-only"])
    assert exc.value.code == 5


def test_cli_canonical_header_only(tmp_path):
    path = tmp_path / "header_only.hl7"
    path.write_text("MSH")

    with pytest.raises(SystemExit) as exc:
        run_cli(["-i", str(path), "--canonical"])
    assert exc.value.code == 2


def test_cli_parse_failure(tmp_path):
    path = tmp_path / "bad.hl7"
    path.write_text("PID|1||123")

    with pytest.raises(SystemExit) as exc:
        run_cli(["-i", str(path)])
    assert exc.value.code == 2


def test_cli_missing_file(tmp_path):
    with pytest.raises(SystemExit) as exc:
        run_cli(["-i", str(tmp_path / "missing.hl7")])
    assert exc.value.code == 1


def test_cli_build_mdm(tmp_path, capsys):
    form = tmp_path / "form.json"
    form.write_text(json.dumps({
        "msh": {
            "sending_application": "EMR",
            "sending_facility": "GH",
            "receiving_application": "DMS",
            "receiving_facility": "RAD",
        },
        "pid": {"patient_id": "123"},
        "txa": {"document_type": "DS", "completion_status": "AU"},
    }))

    run_cli(["--build-mdm", str(form)])

    lines = capsys.readouterr().out.strip().split("\n")
    assert lines[0].startswith("MSH|^~\\&|EMR|GH|DMS|RAD|")
    assert lines[1] == "PID|||123||||||||"
    assert lines[2].startswith("TXA||DS|")


def test_cli_build_mdm_incomplete_form(tmp_path):
    form = tmp_path / "form.json"
    form.write_text(json.dumps({"pid": {"patient_id": "123"}}))

    with pytest.raises(SystemExit) as exc:
        run_cli(["--build-mdm", str(form)])
    assert exc.value.code == 5


def test_cli_requires_input():
    with pytest.raises(SystemExit) as exc:
        run_cli([])
    assert exc.value.code == 1
