# Elasticsearch ILM policy, component and index templates for the practice data stream

DATA_STREAM = "logs-filestream.generic-default"
BACKING_INDEX_PREFIX = f".ds-{DATA_STREAM}"
ILM_POLICY_NAME = "logs"
PACKAGE_TEMPLATE_NAME = "logs@package"
CUSTOM_TEMPLATE_PREFIX = "logs@custom"
INDEX_TEMPLATE_NAME = DATA_STREAM

# Field whose type diverges across backing indices, and the type ECS assigns it
CONFLICT_FIELD = "log.offset"
ECS_EXPECTED_TYPE = "long"

ILM_POLICY = {
	"phases": {
		"hot": {
			"min_age": "0ms",
			"actions": {
				"rollover": {
					"max_primary_shard_size": "50gb",
					"max_age": "30d",
				},
				"set_priority": {"priority": 100},
			},
		},
		"warm": {
			"min_age": "7d",
			"actions": {
				"shrink": {"number_of_shards": 1},
				"forcemerge": {"max_num_segments": 1},
				"set_priority": {"priority": 50},
			},
		},
		"cold": {
			"min_age": "30d",
			"actions": {
				"set_priority": {"priority": 0},
			},
		},
		"delete": {
			"min_age": "90d",
			"actions": {
				"delete": {},
			},
		},
	}
}

PACKAGE_COMPONENT_TEMPLATE = {
	"template": {
		"settings": {
			"index.lifecycle.name": ILM_POLICY_NAME,
		},
		"mappings": {
			"properties": {
				"@timestamp": {"type": "date"},
				"message": {"type": "text"},
				"host": {
					"properties": {
						"name": {"type": "keyword"},
					}
				},
				"event": {
					"properties": {
						"dataset": {"type": "keyword"},
					}
				},
			}
		},
	},
	"version": 1,
	"_meta": {
		"description": "Package mappings for filestream logs",
	},
}

INDEX_TEMPLATE = {
	"index_patterns": [f"{DATA_STREAM}*"],
	"data_stream": {},
	"composed_of": [PACKAGE_TEMPLATE_NAME],
	"priority": 200,
	"_meta": {
		"description": "Index template for generic filestream logs",
	},
}

# Body for a backing index created by hand with log.offset pinned to keyword
EXPLICIT_KEYWORD_BACKING_INDEX = {
	"settings": {
		"index.hidden": True,
	},
	"mappings": {
		"properties": {
			"@timestamp": {"type": "date"},
			"message": {"type": "text"},
			"log": {
				"properties": {
					"offset": {"type": "keyword"},
				}
			},
			"host": {
				"properties": {
					"name": {"type": "keyword"},
				}
			},
			"event": {
				"properties": {
					"dataset": {"type": "keyword"},
				}
			},
		}
	},
}


def backing_index_name(generation, date):
	"""Backing index name for a generation, e.g. .ds-<stream>-2026.10.18-000002."""
	return f"{BACKING_INDEX_PREFIX}-{date.strftime('%Y.%m.%d')}-{generation:06d}"
