"""Merge same-purpose resource files into combined targets during a build."""

from resources_merge.__version__ import __version__
from resources_merge.config import MergeConfiguration
from resources_merge.deleter import Deleter
from resources_merge.exceptions import (
    ConfigurationError,
    DeleteError,
    DiscoveryError,
    ResourcesMergeError,
    WriteError,
)
from resources_merge.grouping import MergeGroup, aggregate
from resources_merge.resolver import TargetResolver
from resources_merge.runner import load_config, load_strategies, run_merge
from resources_merge.scanner import SourceFile, scan_files
from resources_merge.strategy import MergeContext, MergeReport, MergeStrategy, RegexMergeStrategy
from resources_merge.writer import MergeWriter

__all__ = [
    "__version__",
    "ConfigurationError",
    "DeleteError",
    "Deleter",
    "DiscoveryError",
    "MergeConfiguration",
    "MergeContext",
    "MergeGroup",
    "MergeReport",
    "MergeStrategy",
    "MergeWriter",
    "RegexMergeStrategy",
    "ResourcesMergeError",
    "SourceFile",
    "TargetResolver",
    "WriteError",
    "aggregate",
    "load_config",
    "load_strategies",
    "run_merge",
    "scan_files",
]
