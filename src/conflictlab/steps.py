# Checked execution of mutating Elasticsearch calls

import logging

from . import console
from .elasticsearch.client import ElasticsearchError, RequestFailedError

logger = logging.getLogger(__name__)


class StepFailedError(ElasticsearchError):
	"""Raised in strict mode when a mutating request is rejected."""

	def __init__(self, step, cause):
		self.step = step
		self.cause = cause
		super().__init__(f"{step} failed: {cause}")


def checked(cfg, step, call, *args, **kwargs):
	"""Run a mutating call, failing fast or warning depending on cfg.strict."""
	try:
		return call(*args, **kwargs)
	except RequestFailedError as e:
		if cfg.strict:
			raise StepFailedError(step, e) from e
		logger.warning("%s failed, continuing: %s", step, e)
		console.warn(f"{step} failed, continuing: {e}")
		return None
