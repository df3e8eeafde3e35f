from __future__ import annotations


class RankRadarError(Exception):
    """Base for failures that abort a fetch, extraction or report run."""

    code = "ERR_RANKRADAR"


class StructuralError(RankRadarError, ValueError):
    """Required markup region is missing or unterminated."""

    code = "ERR_STRUCTURE"


class FormatDriftError(RankRadarError, ValueError):
    """A magnitude carries a unit suffix we do not know how to scale."""

    code = "ERR_FORMAT_DRIFT"


class SourceError(RankRadarError, RuntimeError):
    code = "ERR_SOURCE"


class ConfigError(RankRadarError, RuntimeError):
    code = "ERR_CONFIG"
