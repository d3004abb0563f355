# End-to-end setup of the practice environment

import time

from . import console
from .elasticsearch.client import check_connection
from .elasticsearch.templates import (
	CONFLICT_FIELD,
	DATA_STREAM,
	ECS_EXPECTED_TYPE,
	ILM_POLICY_NAME,
	INDEX_TEMPLATE_NAME,
	PACKAGE_TEMPLATE_NAME,
)
from .ingest import induce_conflict
from .provision import provision_environment
from .verify import print_report, verify_conflict


def print_banner(title, cfg):
	console.header(title)
	console.plain()
	console.plain("Configuration:")
	console.plain(f"  Elasticsearch URL: {cfg.elasticsearch_url}")
	console.plain(f"  Username: {cfg.elasticsearch_user}")


def preflight(client, cfg):
	"""Gate every workflow on an authenticated GET / before any mutation."""
	console.header("Checking Elasticsearch Connectivity")
	info = check_connection(client, cfg)
	console.info("✓ Connected to Elasticsearch")
	console.info(f"  Cluster version: {info.version or 'unknown'}")
	return info


def _print_next_steps(report, cfg):
	console.header("Environment Setup Complete!")
	console.plain()
	console.success("✓ Practice environment is ready!")
	console.plain()
	console.plain("What was created:")
	console.plain(f"  • ILM policy: '{ILM_POLICY_NAME}' (hot/warm/cold/delete phases)")
	console.plain(f"  • Component template: '{PACKAGE_TEMPLATE_NAME}'")
	console.plain(f"  • Index template: '{INDEX_TEMPLATE_NAME}'")
	console.plain(f"  • Data stream: '{DATA_STREAM}'")
	console.plain(f"  • {len(report.indices)} backing indices with {report.total_docs} total documents")
	console.plain(f"  • Mapping conflict on {CONFLICT_FIELD} (should be '{ECS_EXPECTED_TYPE}')")
	console.plain()
	console.plain("Access Kibana to view the conflict:")
	console.plain()
	console.success(f"  {cfg.kibana_url}")
	console.plain()
	console.plain("Steps to see the conflict:")
	console.plain("  1. Go to: Stack Management → Data Views")
	console.plain(f"  2. Create data view for pattern: {DATA_STREAM}*")
	console.plain(f"  3. Look for the warning icon on '{CONFLICT_FIELD}' field")
	console.plain("  4. Click the field to see the type conflict across indices")
	console.plain()
	console.plain("Practice the resolution workflow:")
	console.plain("  1. Review the README for the complete reindexing procedure")
	console.plain(f"  2. Check ECS: {CONFLICT_FIELD} should be type '{ECS_EXPECTED_TYPE}'")
	console.plain("  3. Create @custom component template with correct mapping")
	console.plain("  4. Reindex each backing index with corrected mapping")
	console.plain("  5. Verify document counts match")
	console.plain("  6. Delete old backing indices")
	console.plain()
	console.plain("Useful commands:")
	console.plain()
	console.plain("  # View data stream")
	console.plain(f"  GET _data_stream/{DATA_STREAM}")
	console.plain()
	console.plain("  # Check mapping conflict")
	console.plain(f"  GET .ds-{DATA_STREAM}*/_mapping/field/{CONFLICT_FIELD}")
	console.plain()
	console.plain("  # Count documents")
	console.plain(f"  GET {DATA_STREAM}/_count")
	console.plain()
	console.plain("  # Re-check the conflict at any time")
	console.plain("  conflictlab status")
	console.plain()
	console.plain("To clean up this environment:")
	console.plain()
	console.plain(f"  DELETE _data_stream/{DATA_STREAM}")
	console.plain(f"  DELETE _index_template/{INDEX_TEMPLATE_NAME}")
	console.plain(f"  DELETE _component_template/{PACKAGE_TEMPLATE_NAME}")
	console.plain(f"  DELETE _ilm/policy/{ILM_POLICY_NAME}")
	console.plain()


def run_setup(client, cfg, scenario, sleep=time.sleep, today=None):
	"""Provision templates, ingest conflicting documents and report the conflict."""
	print_banner("Mapping Conflict Example Environment Setup", cfg)
	console.plain(f"  Scenario: {scenario.value} ({scenario.description})")
	preflight(client, cfg)
	provision_environment(client, cfg)
	induce_conflict(client, cfg, scenario, sleep=sleep, today=today)
	report = verify_conflict(client, scenario)
	print_report(report)
	_print_next_steps(report, cfg)
	return report
