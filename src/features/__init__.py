"""ECMAScript editions and the catalog of edition-introducing features."""

from .catalog import EsFeature, edition_of, latest_feature
from .versions import EsVersion, latest_version

__all__ = ["EsFeature", "EsVersion", "edition_of", "latest_feature", "latest_version"]
