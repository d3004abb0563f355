# Conflict scenarios and the practice documents they ingest

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Union

from .elasticsearch.templates import ECS_EXPECTED_TYPE


class Scenario(str, Enum):
	"""How the log.offset conflict is produced.

	ROLLOVER writes string offsets before and after a rollover and relies on
	dynamic mapping, so every generation ends up with a string type where ECS
	expects ``long``. EXPLICIT writes numeric offsets into the first generation
	and string offsets into a hand-made backing index whose mapping pins
	log.offset to ``keyword``, so the generations disagree deterministically.
	"""
	ROLLOVER = "rollover"
	EXPLICIT = "explicit"

	@property
	def description(self) -> str:
		if self is Scenario.ROLLOVER:
			return "string offsets across a rollover (dynamic mapping)"
		return "numeric offsets, then an explicit keyword backing index"

	def detects_conflict(self, field_types) -> bool:
		"""Verdict for the per-index types of log.offset, in generation order."""
		types = [t for t in field_types if t]
		if not types:
			return False
		if self is Scenario.ROLLOVER:
			return types[0] != ECS_EXPECTED_TYPE
		return len(set(types)) > 1


def parse_scenario(value: Union[str, Scenario, None]) -> Scenario:
	if isinstance(value, Scenario):
		return value
	if not value:
		return Scenario.EXPLICIT
	try:
		return Scenario(value.strip().lower())
	except ValueError:
		choices = ", ".join(s.value for s in Scenario)
		raise ValueError(f"Unknown scenario '{value}' (expected one of: {choices})")


def _now() -> str:
	"""Current UTC timestamp in ISO 8601 format with milliseconds."""
	return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


def build_document(
	number: int,
	offset: Any,
	host: str,
	batch: str,
	timestamp: Optional[str] = None,
) -> Dict[str, Any]:
	"""Build one practice log document; ``offset`` keeps whatever JSON type it is given."""
	return {
		"@timestamp": timestamp or _now(),
		"message": f"Log message {number} from {batch} batch",
		"log": {"offset": offset},
		"host": {"name": host},
		"event": {"dataset": "generic.log"},
	}
