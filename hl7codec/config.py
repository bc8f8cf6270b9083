"""Codec configuration using Pydantic Settings."""

from functools import lru_cache
from typing import List, Literal

from pydantic_settings import BaseSettings

MDM_T02_SEGMENT_ORDER = ("MSH", "PID", "PV1", "TXA", "OBX")


class CodecSettings(BaseSettings):
    """Settings loaded from HL7CODEC_* environment variables."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Upper bounds applied while parsing; excess items are dropped with a warning.
    max_segments: int = 10000
    max_fields: int = 1000
    max_repetitions: int = 1000
    max_components: int = 100

    segment_order: List[str] = list(MDM_T02_SEGMENT_ORDER)

    model_config = {"env_prefix": "HL7CODEC_", "case_sensitive": False}


@lru_cache(maxsize=1)
def get_settings() -> CodecSettings:
    return CodecSettings()


__all__ = ["CodecSettings", "MDM_T02_SEGMENT_ORDER", "get_settings"]
