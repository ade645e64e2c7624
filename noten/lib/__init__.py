"""Core library: skeleton, substitution, processing, dependency tracking."""

from noten.lib.config import NotenConfig, load_config
from noten.lib.deps import DependencyStore
from noten.lib.process import find_title, process
from noten.lib.site import BuildReport, SiteBuilder, build_site
from noten.lib.skeleton import Skeleton
from noten.lib.staleness import needs_rebuild
from noten.lib.substitution import ProcessingContext, substitute

__all__ = [
    "BuildReport",
    "DependencyStore",
    "NotenConfig",
    "ProcessingContext",
    "SiteBuilder",
    "Skeleton",
    "build_site",
    "find_title",
    "load_config",
    "needs_rebuild",
    "process",
    "substitute",
]
