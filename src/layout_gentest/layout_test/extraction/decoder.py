import json
import logging

from pydantic import BaseModel, ValidationError

from layout_gentest.layout_test.entities.fixture import FixtureProgram, TestCase
from layout_gentest.layout_test.errors import ExtractionError

logger = logging.getLogger(__name__)

PAYLOAD_KEY = "gentest"


class _Payload(BaseModel):
    cases: list[TestCase]


def find_payload_messages(messages: list[str]) -> list[dict]:
    """Return the decoded JSON objects carrying the payload key.

    Console noise (non-JSON text, JSON without the key) is ignored.
    """
    payloads = []
    for text in messages:
        try:
            decoded = json.loads(text)
        except (ValueError, TypeError):
            continue
        if isinstance(decoded, dict) and PAYLOAD_KEY in decoded:
            payloads.append(decoded[PAYLOAD_KEY])
    return payloads


def decode_payload(messages: list[str], suite_name: str) -> FixtureProgram:
    """Entrypoint: turn the console messages of one fixture run into a FixtureProgram.

    Args:
      messages    console log texts captured from the page, in order
      suite_name  the fixture name, used as the suite name

    Raises:
      ExtractionError when there is not exactly one payload or it fails validation.

    """
    payloads = find_payload_messages(messages)
    if not payloads:
        raise ExtractionError(f"{suite_name}: page logged no '{PAYLOAD_KEY}' payload ({len(messages)} message(s) seen)")
    if len(payloads) > 1:
        raise ExtractionError(f"{suite_name}: page logged {len(payloads)} payloads, expected exactly one")

    try:
        payload = _Payload.model_validate(payloads[0])
    except ValidationError as e:
        raise ExtractionError(f"{suite_name}: malformed payload: {e}") from e

    logger.debug("Decoded %d case(s) for %s", len(payload.cases), suite_name)
    return FixtureProgram(suite_name=suite_name, cases=payload.cases)
