"""
MDM^T02 message builder.

Takes the flat set of form values collected for a clinical document
notification (sender/receiver, patient, document header, optional visit and
observations) and maps them onto a Document, which the generator then turns
into text.
"""

import datetime
import random
import time
from typing import List, Optional

from pydantic import BaseModel, Field as PydanticField

from hl7codec.fields import CompositeField, Document, Segment, SimpleField
from hl7codec.hl7_generate import ENCODING_CHARACTERS, FIELD_SEPARATOR, generate_hl7


class MSHData(BaseModel):
    sending_application: str = ""
    sending_facility: str = ""
    receiving_application: str = ""
    receiving_facility: str = ""
    message_control_id: str = ""
    processing_id: str = "P"
    version_id: str = "2.5"


class PIDData(BaseModel):
    patient_id: str = ""
    patient_id_list: str = ""
    patient_name: str = ""
    date_of_birth: str = ""
    sex: str = ""
    address: str = ""


class TXAData(BaseModel):
    document_type: str = ""
    content_presentation: str = ""
    activity_date_time: str = ""
    primary_activity_provider: str = ""
    completion_status: str = ""
    unique_document_number: str = ""


class PV1Data(BaseModel):
    patient_class: str = ""
    assigned_patient_location: str = ""


class OBXData(BaseModel):
    set_id: str = ""
    value_type: str = ""
    observation_identifier: str = ""
    observation_value: str = ""
    units: str = ""


class MDMMessageData(BaseModel):
    msh: MSHData = PydanticField(default_factory=MSHData)
    pid: PIDData = PydanticField(default_factory=PIDData)
    txa: TXAData = PydanticField(default_factory=TXAData)
    pv1: Optional[PV1Data] = None
    obx: List[OBXData] = PydanticField(default_factory=list)


def _format_hl7_ts(dt: datetime.datetime) -> str:
    """Format datetime as HL7 TS: YYYYMMDDHHMMSS."""
    return dt.strftime("%Y%m%d%H%M%S")


def generate_message_control_id() -> str:
    """MSG + epoch milliseconds + random number 0-9999."""
    return f"MSG{int(time.time() * 1000)}{random.randint(0, 9999)}"


def missing_required_inputs(data: MDMMessageData) -> List[str]:
    """
    Form-level checks run before building. Returns one message per missing
    value (empty when the form is complete).
    """
    errors = []

    if not data.msh.sending_application:
        errors.append("MSH-3 (Sending Application) is required")
    if not data.msh.sending_facility:
        errors.append("MSH-4 (Sending Facility) is required")
    if not data.msh.receiving_application:
        errors.append("MSH-5 (Receiving Application) is required")
    if not data.msh.receiving_facility:
        errors.append("MSH-6 (Receiving Facility) is required")

    if not data.pid.patient_id and not data.pid.patient_id_list:
        errors.append("PID-3 (Patient ID or Patient ID List) is required")

    if not data.txa.document_type:
        errors.append("TXA-2 (Document Type) is required")
    if not data.txa.completion_status:
        errors.append("TXA-12 (Completion Status) is required")

    return errors


def build_mdm_document(
    data: MDMMessageData,
    now: Optional[datetime.datetime] = None,
) -> Document:
    now = now or datetime.datetime.now()
    timestamp = _format_hl7_ts(now)
    control_id = data.msh.message_control_id or generate_message_control_id()

    document = Document()

    document.add(Segment("MSH", {
        1: SimpleField(FIELD_SEPARATOR),
        2: SimpleField(ENCODING_CHARACTERS),
        3: SimpleField(data.msh.sending_application),
        4: SimpleField(data.msh.sending_facility),
        5: SimpleField(data.msh.receiving_application),
        6: SimpleField(data.msh.receiving_facility),
        7: SimpleField(timestamp),
        9: CompositeField({1: "MDM", 2: "T02"}),
        10: SimpleField(control_id),
        11: SimpleField(data.msh.processing_id or "P"),
        12: SimpleField(data.msh.version_id or "2.5"),
    }))

    document.add(Segment("PID", {
        3: SimpleField(data.pid.patient_id_list or data.pid.patient_id),
        5: SimpleField(data.pid.patient_name),
        7: SimpleField(data.pid.date_of_birth),
        8: SimpleField(data.pid.sex),
        11: SimpleField(data.pid.address),
    }))

    if data.pv1 is not None:
        document.add(Segment("PV1", {
            2: SimpleField(data.pv1.patient_class),
            3: SimpleField(data.pv1.assigned_patient_location),
        }))

    document.add(Segment("TXA", {
        2: SimpleField(data.txa.document_type),
        3: SimpleField(data.txa.content_presentation),
        4: SimpleField(data.txa.activity_date_time or timestamp),
        5: SimpleField(data.txa.primary_activity_provider),
        12: SimpleField(data.txa.completion_status),
        16: SimpleField(data.txa.unique_document_number),
    }))

    for obx in data.obx:
        document.add(Segment("OBX", {
            1: SimpleField(obx.set_id),
            2: SimpleField(obx.value_type),
            3: SimpleField(obx.observation_identifier),
            5: SimpleField(obx.observation_value),
            6: SimpleField(obx.units),
        }))

    return document


def generate_mdm(data: MDMMessageData, now: Optional[datetime.datetime] = None) -> str:
    """
    Build and serialize an MDM^T02 message. Segments are separated by \\r.
    """
    return generate_hl7(build_mdm_document(data, now=now))
