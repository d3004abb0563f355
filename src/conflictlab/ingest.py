# Ingestion that leaves log.offset with diverging types across backing indices

import logging
import time
from datetime import datetime, timezone
from typing import Callable, List

from . import console
from .elasticsearch.responses import DataStreamInfo
from .elasticsearch.templates import (
	DATA_STREAM,
	EXPLICIT_KEYWORD_BACKING_INDEX,
	backing_index_name,
)
from .scenario import Scenario, build_document
from .steps import checked

logger = logging.getLogger(__name__)

BATCH_SIZE = 5


def _write_batch(client, cfg, target, numbers, offset_for, host, batch, sleep):
	for number in numbers:
		doc = build_document(number, offset_for(number), host, batch)
		checked(cfg, f"Index document {number} into '{target}'", client.index, target, doc)
		sleep(cfg.write_delay)


def _induce_rollover(client, cfg, sleep):
	console.plain("Step 1: Ingesting documents with log.offset as a string (incorrect)...")
	_write_batch(client, cfg, DATA_STREAM, range(1, BATCH_SIZE + 1),
		lambda n: str(n * 100), "server-01", "first", sleep)
	console.info(f"✓ Ingested {BATCH_SIZE} documents with log.offset as a string")

	console.plain("Step 2: Rolling over to create second backing index...")
	checked(cfg, f"Roll over '{DATA_STREAM}'", client.indices.rollover, DATA_STREAM)
	sleep(cfg.settle_delay)
	console.info("✓ Data stream rolled over")

	console.plain("Step 3: Ingesting more documents with log.offset as a string...")
	_write_batch(client, cfg, DATA_STREAM, range(BATCH_SIZE + 1, 2 * BATCH_SIZE + 1),
		lambda n: str(n * 100), "server-02", "second", sleep)
	console.info(f"✓ Ingested {BATCH_SIZE} more documents with log.offset as a string")
	console.warn("  Mapping conflict created: log.offset is a string type but should be 'long' per ECS")


def _induce_explicit(client, cfg, sleep, today):
	console.plain("Step 1: Ingesting documents with log.offset as a number...")
	_write_batch(client, cfg, DATA_STREAM, range(1, BATCH_SIZE + 1),
		lambda n: n * 100, "server-01", "first", sleep)
	console.info(f"✓ Ingested {BATCH_SIZE} documents with log.offset as a number (long)")

	stream = DataStreamInfo.from_response(client.indices.get_data_stream(DATA_STREAM), DATA_STREAM)
	generation = stream.generation if stream else 1
	second_index = backing_index_name(generation + 1, today)

	console.plain(f"Step 2: Creating backing index {second_index} with log.offset as keyword...")
	checked(cfg, f"Create backing index '{second_index}'",
		client.indices.create, second_index, EXPLICIT_KEYWORD_BACKING_INDEX)
	console.info(f"✓ Created {second_index}")

	# Backing indices reject op_type=create writes; fill the index before registering it
	console.plain("Step 3: Ingesting documents with log.offset as a string into the keyword index...")
	_write_batch(client, cfg, second_index, range(BATCH_SIZE + 1, 2 * BATCH_SIZE + 1),
		lambda n: str(n * 100), "server-02", "second", sleep)
	checked(cfg, f"Refresh '{second_index}'", client.indices.refresh, second_index)
	console.info(f"✓ Ingested {BATCH_SIZE} documents with log.offset as keyword")

	console.plain(f"Step 4: Adding {second_index} to the data stream...")
	checked(cfg, f"Add '{second_index}' to '{DATA_STREAM}'",
		client.indices.modify_data_stream,
		[{"add_backing_index": {"data_stream": DATA_STREAM, "index": second_index}}])
	sleep(cfg.settle_delay)
	console.info(f"✓ Backing index {second_index} added to the data stream")
	console.warn("  Mapping conflict created: log.offset is 'long' in one backing index and 'keyword' in the other")


def induce_conflict(
	client,
	cfg,
	scenario: Scenario,
	sleep: Callable[[float], None] = time.sleep,
	today=None,
) -> List[str]:
	"""Ingest 2 x 5 documents so log.offset is mapped differently than ECS expects.

	Returns the backing indices of the data stream afterwards. The data stream
	is refreshed at the end so document counts are exact.
	"""
	console.header("Creating Data Stream with Mapping Conflict")
	logger.debug("Inducing conflict with scenario %s", scenario.value)
	if scenario is Scenario.ROLLOVER:
		_induce_rollover(client, cfg, sleep)
	else:
		_induce_explicit(client, cfg, sleep, today or datetime.now(timezone.utc))
	checked(cfg, f"Refresh '{DATA_STREAM}'", client.indices.refresh, DATA_STREAM)
	stream = DataStreamInfo.from_response(client.indices.get_data_stream(DATA_STREAM), DATA_STREAM)
	return stream.indices if stream else []
