"""Configuration <-> wire codecs."""

from artifactory_webhooks.codecs.criteria import CRITERIA_CODECS, CriteriaCodec
from artifactory_webhooks.codecs.handlers import pack_handlers, unpack_handlers

__all__ = [
    "CRITERIA_CODECS",
    "CriteriaCodec",
    "pack_handlers",
    "unpack_handlers",
]
