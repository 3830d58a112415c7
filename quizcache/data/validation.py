"""Schema validation for generated question payloads."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from ..errors import MalformedResponse
from .schemas import QuestionRecord

logger = logging.getLogger(__name__)

NUM_OPTIONS = 4


@dataclass
class FieldSpec:
    """Specification for a payload field."""
    name: str
    type: type
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    item_type: Optional[type] = None
    validator: Optional[Callable[[Any], bool]] = None


@dataclass
class RecordSchema:
    name: str
    fields: List[FieldSpec]


def _no_duplicates(values: list) -> bool:
    return len(set(values)) == len(values)


def _non_blank(value: str) -> bool:
    return bool(value.strip())


QUESTION_SCHEMA = RecordSchema(
    name="question",
    fields=[
        FieldSpec(name="question", type=str, min_length=1, validator=_non_blank),
        FieldSpec(
            name="options",
            type=list,
            min_length=NUM_OPTIONS,
            max_length=NUM_OPTIONS,
            item_type=str,
            validator=_no_duplicates,
        ),
        FieldSpec(name="correctAnswer", type=str, min_length=1),
        FieldSpec(name="explanation", type=str, min_length=1, validator=_non_blank),
    ],
)


class RecordValidator:
    """Validator for a single decoded payload."""

    def __init__(self, schema: RecordSchema):
        self.schema = schema

    def validate(self, record: Any) -> List[str]:
        """Validate a decoded JSON value against the schema.

        Args:
            record: Value produced by ``json.loads``

        Returns:
            List of validation errors (empty if valid)
        """
        if not isinstance(record, dict):
            return [f"Expected a JSON object, got {type(record).__name__}"]

        errors = []
        for spec in self.schema.fields:
            if spec.name not in record:
                errors.append(f"Missing required field: {spec.name}")
                continue

            value = record[spec.name]
            if not isinstance(value, spec.type):
                errors.append(
                    f"Field {spec.name} has wrong type: expected {spec.type.__name__}, "
                    f"got {type(value).__name__}"
                )
                continue

            if isinstance(value, str):
                if spec.min_length and len(value) < spec.min_length:
                    errors.append(f"Field {spec.name} too short: minimum {spec.min_length} chars")
                if spec.max_length and len(value) > spec.max_length:
                    errors.append(f"Field {spec.name} too long: maximum {spec.max_length} chars")

            if isinstance(value, list):
                if spec.min_length and len(value) < spec.min_length:
                    errors.append(f"Field {spec.name} has too few items: minimum {spec.min_length}")
                if spec.max_length and len(value) > spec.max_length:
                    errors.append(f"Field {spec.name} has too many items: maximum {spec.max_length}")
                if spec.item_type is not None:
                    bad = [i for i, v in enumerate(value) if not isinstance(v, spec.item_type)]
                    if bad:
                        errors.append(f"Field {spec.name} has non-{spec.item_type.__name__} items at {bad}")
                        continue
                    if any(not v for v in value):
                        errors.append(f"Field {spec.name} contains empty items")

            if spec.validator:
                try:
                    if not spec.validator(value):
                        errors.append(f"Field {spec.name} failed validation")
                except Exception as e:
                    errors.append(f"Field {spec.name} validation error: {e}")

        if not errors:
            errors.extend(self._cross_field_errors(record))

        return errors

    def _cross_field_errors(self, record: Dict[str, Any]) -> List[str]:
        options = record.get("options")
        answer = record.get("correctAnswer")
        if isinstance(options, list) and answer is not None and answer not in options:
            return [f"correctAnswer {answer!r} is not one of the options"]
        return []


_validator = RecordValidator(QUESTION_SCHEMA)


def parse_question_record(candidate: str) -> QuestionRecord:
    """Decode candidate JSON text into a validated QuestionRecord.

    Args:
        candidate: JSON text isolated from a completion

    Returns:
        The validated record

    Raises:
        MalformedResponse: If the text is not JSON or fails the question schema
    """
    try:
        payload = json.loads(candidate)
    except (json.JSONDecodeError, TypeError) as e:
        raise MalformedResponse(f"Response is not valid JSON: {e}", raw=str(candidate)) from e

    errors = _validator.validate(payload)
    if errors:
        logger.debug("Rejected question payload: %s", "; ".join(errors))
        raise MalformedResponse(
            f"Question payload failed validation with {len(errors)} errors",
            errors=errors,
            raw=candidate,
        )

    return QuestionRecord(
        question=payload["question"],
        options=tuple(payload["options"]),
        correct_answer=payload["correctAnswer"],
        explanation=payload["explanation"],
    )
