from typing import Any, Dict

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
import uvicorn

from hl7codec.config import get_settings
from hl7codec.errors import HL7Error
from hl7codec.hl7_generate import generate_hl7
from hl7codec.mdm_builder import MDMMessageData, generate_mdm, missing_required_inputs
from hl7codec.parse_hl7 import parse_hl7
from hl7codec.reference import document_rows
from hl7codec.serialization import document_from_dict, document_to_dict
from hl7codec.validate_hl7 import should_validate_mdm, validate_mdm

app = FastAPI(title="HL7 Codec API")

# Allow the inspection UI to call the API
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # For production, you can restrict this
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------
# Models
# ---------------------------------------

class HL7Text(BaseModel):
    hl7: str


class DocumentModel(BaseModel):
    document: Dict[str, Any]


# ---------------------------------------
# Endpoints
# ---------------------------------------

@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/parse")
def parse_message(data: HL7Text):
    """Parse HL7 text; MDM messages also get the MDM^T02 profile report."""
    result = parse_hl7(data.hl7)
    if not result.success:
        raise HTTPException(status_code=400, detail=result.error)

    validation = None
    if should_validate_mdm(result.message_type):
        validation = validate_mdm(result.document).to_dict()

    # Every segment may have been skipped, leaving nothing to re-render
    canonical = None
    if len(result.document):
        canonical = generate_hl7(result.document, get_settings().segment_order)

    return {
        "messageType": result.message_type,
        "document": document_to_dict(result.document),
        "rows": document_rows(result.document),
        "canonical": canonical,
        "warnings": result.warnings,
        "validation": validation,
    }


@app.post("/validate")
def validate_document(data: DocumentModel):
    try:
        document = document_from_dict(data.document)
    except (ValueError, TypeError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    return validate_mdm(document).to_dict()


@app.post("/render")
def render_document(data: DocumentModel):
    """Serialize a JSON document tree to canonical HL7 text."""
    try:
        document = document_from_dict(data.document)
        message = generate_hl7(document, get_settings().segment_order)
    except (HL7Error, ValueError, TypeError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"message": message}


@app.post("/generate-mdm")
def generate_mdm_message(data: MDMMessageData):
    missing = missing_required_inputs(data)
    if missing:
        raise HTTPException(status_code=400, detail=missing)
    return {"message": generate_mdm(data)}


# Dev server entrypoint
if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
