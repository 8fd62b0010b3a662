"""Ignore lists and CI configuration files."""

from citoken.infrastructure.manifest.ci_config import CIConfigFile
from citoken.infrastructure.manifest.ignore_list import IgnoreList, canonical_entry

__all__ = ["CIConfigFile", "IgnoreList", "canonical_entry"]
