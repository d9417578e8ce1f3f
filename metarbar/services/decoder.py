import json
import logging
from collections.abc import Mapping
from pydantic import ValidationError
from typing import Any, List

from metarbar.errors import MalformedBatch, MalformedRecord
from metarbar.models.weather import RawWeatherRecord

logger = logging.getLogger(__name__)


def decode_record(payload: Any) -> RawWeatherRecord:
    """Decode one API record, field by field.

    Only a payload that is not a mapping at all is rejected; individual fields
    that are missing or mistyped come back as None.
    """
    if not isinstance(payload, Mapping):
        raise MalformedRecord(f"Expected a JSON object, got {type(payload).__name__}")
    try:
        return RawWeatherRecord.model_validate(dict(payload))
    except ValidationError as e:
        raise MalformedRecord(str(e)) from e


def decode_batch(payload: Any) -> List[RawWeatherRecord]:
    """Decode a full API response into records.

    `payload` is either the parsed JSON value or the raw response text/bytes.
    The batch fails as a whole when it is not a list of objects.
    """
    if isinstance(payload, (str, bytes, bytearray)):
        try:
            payload = json.loads(payload)
        except ValueError as e:
            logger.warning(f"METAR response is not valid JSON: {e}")
            raise MalformedBatch(f"Invalid JSON: {e}") from e

    if not isinstance(payload, list):
        logger.warning(f"METAR response is a {type(payload).__name__}, expected a list")
        raise MalformedBatch(f"Expected a list of records, got {type(payload).__name__}")

    records = []
    for index, item in enumerate(payload):
        try:
            records.append(decode_record(item))
        except MalformedRecord as e:
            logger.warning(f"Record {index} in METAR response is malformed: {e}")
            raise MalformedBatch(f"Record {index}: {e}") from e
    return records
