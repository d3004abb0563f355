# Idempotent creation of the ILM policy and templates behind the data stream

from . import console
from .elasticsearch.templates import (
	ILM_POLICY,
	ILM_POLICY_NAME,
	INDEX_TEMPLATE,
	INDEX_TEMPLATE_NAME,
	PACKAGE_COMPONENT_TEMPLATE,
	PACKAGE_TEMPLATE_NAME,
)
from .steps import checked


def provision_environment(client, cfg):
	"""PUT the ILM policy, component template and index template.

	Every PUT is a full replace, so running this repeatedly is safe. Once the
	index template exists the first document written to the data stream name
	creates the data stream.
	"""
	console.header("Creating ILM Policy")
	console.plain(f"Creating '{ILM_POLICY_NAME}' ILM policy with hot/warm/cold/delete phases...")
	checked(cfg, f"Create ILM policy '{ILM_POLICY_NAME}'",
		client.ilm.put_lifecycle, ILM_POLICY_NAME, ILM_POLICY)
	console.info(f"✓ ILM policy '{ILM_POLICY_NAME}' created")

	console.header("Creating @package Component Template")
	console.plain(f"Creating {PACKAGE_TEMPLATE_NAME} component template with ECS mappings...")
	checked(cfg, f"Create component template '{PACKAGE_TEMPLATE_NAME}'",
		client.indices.put_component_template, PACKAGE_TEMPLATE_NAME, PACKAGE_COMPONENT_TEMPLATE)
	console.info(f"✓ Component template '{PACKAGE_TEMPLATE_NAME}' created")

	console.header("Creating Index Template")
	console.plain(f"Creating '{INDEX_TEMPLATE_NAME}' index template...")
	checked(cfg, f"Create index template '{INDEX_TEMPLATE_NAME}'",
		client.indices.put_index_template, INDEX_TEMPLATE_NAME, INDEX_TEMPLATE)
	console.info(f"✓ Index template '{INDEX_TEMPLATE_NAME}' created")
