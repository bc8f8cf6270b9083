from hl7codec.fields import CompositeField, Document, RepeatedField, Segment, SimpleField
from hl7codec.parse_hl7 import parse_hl7
from hl7codec.validate_hl7 import should_validate_mdm, validate_mdm


def _sample_without(mdm_sample, name):
    lines = [line for line in mdm_sample.split("\n") if not line.startswith(name)]
    return parse_hl7("\n".join(lines)).document


def test_sample_is_valid(mdm_sample):
    report = validate_mdm(parse_hl7(mdm_sample).document)

    assert report.valid
    assert report.errors == []
    assert report.warnings == []


def test_missing_pid_is_single_error(mdm_sample):
    report = validate_mdm(_sample_without(mdm_sample, "PID"))

    assert not report.valid
    assert len(report.errors) == 1
    assert "PID" in report.errors[0]


def test_missing_txa_is_error(mdm_sample):
    report = validate_mdm(_sample_without(mdm_sample, "TXA"))

    assert report.errors == ["Missing required segment: TXA"]


def test_missing_msh_is_error():
    doc = Document()
    doc.add(Segment("PID", {3: SimpleField("1")}))

    report = validate_mdm(doc)

    assert "Missing required segment: MSH" in report.errors
    assert "Missing required segment: TXA" in report.errors
    assert len(report.errors) == 2


def test_missing_message_type_is_error():
    doc = parse_hl7("MSH|^~\\&|App\rPID|1||123\rTXA|1|DOC||20240101||||||||AU").document

    report = validate_mdm(doc)

    assert report.errors == ["MSH-9 (Message Type) is required"]
    assert not report.valid


def test_type_mismatch_is_warning_only(mdm_sample):
    text = mdm_sample.replace("MDM^T02^MDM_T02", "MDM^T01")
    report = validate_mdm(parse_hl7(text).document)

    assert report.valid
    assert report.warnings == ["Expected trigger event T02, found: T01"]


def test_simple_message_type_is_compared_as_code(mdm_sample):
    text = mdm_sample.replace("MDM^T02^MDM_T02", "ADT")
    report = validate_mdm(parse_hl7(text).document)

    assert report.valid
    assert report.warnings == [
        "Expected message type MDM, found: ADT",
        "Expected trigger event T02, found: ",
    ]


def test_recommended_fields_are_warnings():
    doc = parse_hl7(
        "MSH|^~\\&|A||||||MDM^T02\rPID|1||^^^MRN\rTXA|1"
    ).document

    report = validate_mdm(doc)

    assert report.valid
    assert report.warnings == [
        "PID-3 (Patient Identifier List) is recommended",
        "TXA-2 (Document Type) is recommended",
        "TXA-4 (Activity Date/Time) is recommended",
        "TXA-12 (Completion Status) is recommended",
    ]


def test_repeated_patient_identifier_is_accepted():
    doc = Document()
    doc.add(Segment("MSH", {9: CompositeField({1: "MDM", 2: "T02"})}))
    doc.add(Segment("PID", {3: RepeatedField((SimpleField("1"), SimpleField("2")))}))
    doc.add(Segment("TXA", {
        2: SimpleField("DS"), 4: SimpleField("20240101"), 12: SimpleField("AU"),
    }))

    report = validate_mdm(doc)

    assert report.valid
    assert report.warnings == []


def test_validation_does_not_mutate_document(mdm_sample):
    doc = parse_hl7(mdm_sample).document
    before = doc.segment_names(), doc["PID"].fields.copy()

    validate_mdm(doc)

    assert (doc.segment_names(), doc["PID"].fields) == before


def test_report_to_dict():
    report = validate_mdm(Document())

    assert report.to_dict() == {
        "valid": False,
        "errors": [
            "Missing required segment: MSH",
            "Missing required segment: PID",
            "Missing required segment: TXA",
        ],
        "warnings": [],
    }


def test_should_validate_mdm():
    assert should_validate_mdm("MDM^T02")
    assert should_validate_mdm("MDM")
    assert not should_validate_mdm("ADT^A01")
    assert not should_validate_mdm(None)
