# Mapping conflict diagnosis for the practice data stream

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from . import console
from .elasticsearch.client import DataStreamNotFoundError
from .elasticsearch.responses import DataStreamInfo, field_type
from .elasticsearch.templates import CONFLICT_FIELD, DATA_STREAM, ECS_EXPECTED_TYPE
from .scenario import Scenario


def _generation(index_name: str) -> int:
	suffix = index_name.rsplit("-", 1)[-1]
	return int(suffix) if suffix.isdigit() else 0


@dataclass
class ConflictReport:
	"""Outcome of inspecting log.offset across the data stream's backing indices."""
	data_stream: str
	scenario: Scenario
	total_docs: int
	# Backing index name -> log.offset type, in generation order
	field_types: Dict[str, Optional[str]] = field(default_factory=dict)
	expected_type: str = ECS_EXPECTED_TYPE

	@property
	def indices(self) -> List[str]:
		return list(self.field_types)

	@property
	def first_index(self) -> Optional[str]:
		return self.indices[0] if self.field_types else None

	@property
	def last_index(self) -> Optional[str]:
		return self.indices[-1] if self.field_types else None

	@property
	def conflict(self) -> bool:
		return self.scenario.detects_conflict(list(self.field_types.values()))


def verify_conflict(client, scenario: Scenario) -> ConflictReport:
	"""Read the data stream, its document count and each backing index mapping.

	Raises DataStreamNotFoundError when the data stream does not exist.
	"""
	stream = DataStreamInfo.from_response(client.indices.get_data_stream(DATA_STREAM), DATA_STREAM)
	if stream is None:
		raise DataStreamNotFoundError(
			f"Data stream '{DATA_STREAM}' does not exist.\n"
			f"Run 'conflictlab setup' to create it."
		)
	total_docs = client.count(DATA_STREAM)
	field_types = {}
	for index in sorted(stream.indices, key=_generation):
		field_types[index] = field_type(client.indices.get_mapping(index), index, CONFLICT_FIELD)
	return ConflictReport(
		data_stream=DATA_STREAM,
		scenario=scenario,
		total_docs=total_docs,
		field_types=field_types,
	)


def print_report(report: ConflictReport):
	console.header("Verifying Data Stream")
	console.info(f"✓ Data stream found: {report.data_stream}")
	console.info(f"  Backing indices: {len(report.field_types)}")
	console.info(f"  Total documents: {report.total_docs}")

	console.header("Mapping Conflict Details")
	console.plain("Checking field mappings across backing indices...")
	console.plain()
	shown = [report.first_index]
	if report.last_index != report.first_index:
		shown.append(report.last_index)
	for label, index in zip(("First", "Last"), shown):
		if index is None:
			continue
		console.plain(f"{label} backing index: {index}")
		console.plain(f"  {CONFLICT_FIELD} type: {report.field_types[index] or 'unmapped'}")
	console.plain()

	if report.conflict:
		console.warn("CONFLICT DETECTED!")
		console.plain()
		for index, mapped in report.field_types.items():
			console.plain(f"  {index}: {CONFLICT_FIELD} is '{mapped or 'unmapped'}'")
		console.plain(f"  Expected (ECS): {CONFLICT_FIELD} should be '{report.expected_type}'")
		console.plain()
		console.plain("This is the mapping conflict you will practice resolving!")
	else:
		observed = ", ".join(sorted({t for t in report.field_types.values() if t})) or "unmapped"
		console.info(f"{CONFLICT_FIELD} type: {observed}")
