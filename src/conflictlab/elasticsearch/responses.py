# Typed records decoded from Elasticsearch JSON responses

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class ClusterInfo:
	"""Subset of the cluster root response (GET /)."""
	name: Optional[str] = None
	cluster_name: Optional[str] = None
	version: Optional[str] = None

	@classmethod
	def from_response(cls, body: Dict[str, Any]) -> "ClusterInfo":
		version = body.get("version") or {}
		return cls(
			name=body.get("name"),
			cluster_name=body.get("cluster_name"),
			version=version.get("number") if isinstance(version, dict) else None,
		)


@dataclass
class DataStreamInfo:
	"""One entry of GET _data_stream/{name}."""
	name: str
	generation: int = 0
	indices: List[str] = field(default_factory=list)
	template: Optional[str] = None
	status: Optional[str] = None

	@classmethod
	def from_response(cls, body: Optional[Dict[str, Any]], name: str) -> Optional["DataStreamInfo"]:
		"""Decode the entry for ``name``; None when the stream does not exist."""
		if not body:
			return None
		for stream in body.get("data_streams", []):
			if stream.get("name") != name:
				continue
			return cls(
				name=name,
				generation=int(stream.get("generation", 0)),
				indices=[entry["index_name"] for entry in stream.get("indices", [])],
				template=stream.get("template"),
				status=stream.get("status"),
			)
		return None


@dataclass
class CatIndex:
	"""One row of GET _cat/indices?format=json."""
	name: str
	health: Optional[str] = None
	status: Optional[str] = None
	docs_count: Optional[int] = None

	@classmethod
	def from_row(cls, row: Dict[str, Any]) -> "CatIndex":
		docs = row.get("docs.count")
		return cls(
			name=row["index"],
			health=row.get("health"),
			status=row.get("status"),
			docs_count=int(docs) if docs not in (None, "") else None,
		)


def component_template_names(body: Optional[Dict[str, Any]]) -> List[str]:
	"""Names listed by GET _component_template."""
	if not body:
		return []
	return [entry["name"] for entry in body.get("component_templates", [])]


def field_type(mapping_response: Optional[Dict[str, Any]], index: str, path: str) -> Optional[str]:
	"""Look up the concrete type of a dotted field path in a GET {index}/_mapping body.

	Walks nested ``properties`` objects; returns None when the index or any
	segment of the path is absent. Object fields without an explicit type
	report ``object``.
	"""
	if not mapping_response or index not in mapping_response:
		return None
	node = mapping_response[index].get("mappings", {})
	for segment in path.split("."):
		properties = node.get("properties") or {}
		if segment not in properties:
			return None
		node = properties[segment]
	if "type" in node:
		return node["type"]
	return "object" if "properties" in node else None
