# Tear down the practice data stream and recreate the conflicted state

import logging
import time
from typing import Callable

from . import console
from .elasticsearch.client import ElasticsearchError
from .elasticsearch.responses import CatIndex, DataStreamInfo, component_template_names
from .elasticsearch.templates import (
	BACKING_INDEX_PREFIX,
	CUSTOM_TEMPLATE_PREFIX,
	DATA_STREAM,
	ILM_POLICY_NAME,
	INDEX_TEMPLATE_NAME,
	PACKAGE_TEMPLATE_NAME,
)
from .steps import checked
from .workflow import preflight, print_banner, run_setup

logger = logging.getLogger(__name__)


def is_confirmed(answer) -> bool:
	return (answer or "").strip() in ("y", "Y")


def _delete_data_stream(client, cfg):
	console.header("Cleaning Up Data Stream")
	console.plain("Checking for existing data stream...")
	stream = DataStreamInfo.from_response(client.indices.get_data_stream(DATA_STREAM), DATA_STREAM)
	if stream is None:
		console.info("No existing data stream found")
		return
	console.info(f"Found data stream: {DATA_STREAM}")
	console.info(f"  Current document count: {client.count(DATA_STREAM)}")
	console.plain("Deleting data stream and all backing indices...")
	checked(cfg, f"Delete data stream '{DATA_STREAM}'", client.indices.delete_data_stream, DATA_STREAM)
	console.info("✓ Data stream deleted")


def _delete_detached_indices(client):
	"""Delete leftover backing indices, e.g. reindex targets detached from the stream."""
	console.header("Cleaning Up Reindexed Indices")
	console.plain("Checking for leftover backing indices...")
	rows = [CatIndex.from_row(row) for row in client.cat.indices(f"{BACKING_INDEX_PREFIX}*")]
	if not rows:
		console.info("No leftover indices found")
		return
	for row in rows:
		console.info(f"Deleting leftover index: {row.name}")
		try:
			client.indices.delete(row.name)
		except ElasticsearchError as e:
			logger.warning("Could not delete index %s: %s", row.name, e)
	console.info("✓ Leftover indices cleaned up")


def _delete_custom_templates(client, cfg):
	console.header("Cleaning Up @custom Component Templates")
	console.plain("Checking for @custom component templates...")
	names = [
		name for name in component_template_names(client.indices.get_component_template())
		if name.startswith(CUSTOM_TEMPLATE_PREFIX)
	]
	if not names:
		console.info("No @custom component templates found")
		return
	for name in names:
		console.info(f"Deleting component template: {name}")
		checked(cfg, f"Delete component template '{name}'", client.indices.delete_component_template, name)
	console.info("✓ @custom component templates deleted")


def _verify_cleanup(client):
	console.header("Verifying Cleanup")
	if client.indices.get_data_stream(DATA_STREAM) is not None:
		console.warn("Data stream still exists (this shouldn't happen)")
	else:
		console.info("✓ Data stream removed")

	remaining = client.cat.indices(f"{BACKING_INDEX_PREFIX}*")
	if remaining:
		console.warn(f"Found {len(remaining)} remaining backing indices")
	else:
		console.info("✓ All backing indices removed")

	if client.indices.get_component_template(PACKAGE_TEMPLATE_NAME) is not None:
		console.info("✓ Base @package template preserved")
	else:
		console.warn("Base @package template not found (will be recreated)")
	if client.indices.get_index_template(INDEX_TEMPLATE_NAME) is not None:
		console.info("✓ Index template preserved")
	else:
		console.warn("Index template not found (will be recreated)")
	if client.ilm.get_lifecycle(ILM_POLICY_NAME) is not None:
		console.info("✓ ILM policy preserved")
	else:
		console.warn("ILM policy not found (will be recreated)")


def run_reset(
	client,
	cfg,
	scenario,
	ask: Callable[[], str],
	sleep=time.sleep,
	today=None,
):
	"""Confirm, tear down the data stream and @custom templates, then rerun setup.

	Returns the new ConflictReport, or None when the operator declines. A
	declined reset makes no mutating call. The @package template, the index
	template and the ILM policy are kept.
	"""
	print_banner("Reset Mapping Conflict Example Environment", cfg)
	preflight(client, cfg)

	console.header("Confirm Reset")
	console.plain("This will:")
	console.plain(f"  • Delete the data stream: {DATA_STREAM}")
	console.plain("  • Delete all backing indices and documents")
	console.plain("  • Delete @custom component templates (if created)")
	console.plain("  • Keep the base @package template and index template")
	console.plain("  • Keep the ILM policy")
	console.plain("  • Recreate the initial conflicted state")
	console.plain()
	console.warn("All practice changes will be lost!")
	console.plain()
	if not is_confirmed(ask()):
		console.info("Reset cancelled")
		return None

	_delete_data_stream(client, cfg)
	_delete_detached_indices(client)
	_delete_custom_templates(client, cfg)
	_verify_cleanup(client)

	console.header("Recreating Initial Conflicted State")
	report = run_setup(client, cfg, scenario, sleep=sleep, today=today)

	console.header("Reset Complete!")
	console.plain()
	console.success("✓ Environment has been reset to initial state!")
	console.plain()
	console.plain("You can now practice the reindexing workflow again!")
	return report
