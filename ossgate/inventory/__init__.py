from ossgate.inventory.extractors import (
    GenericOssInfoExtractor,
    ModuleBuild,
    MultiModuleExtractor,
    MultiModuleOssInfoExtractor,
    OssInfoExtractor,
)
from ossgate.inventory.manifest import load_module_manifest
from ossgate.inventory.types import Coordinates, DependencyInfo, ProjectInfo, ProjectInventory

__all__ = [
    "Coordinates",
    "DependencyInfo",
    "GenericOssInfoExtractor",
    "ModuleBuild",
    "MultiModuleExtractor",
    "MultiModuleOssInfoExtractor",
    "OssInfoExtractor",
    "ProjectInfo",
    "ProjectInventory",
    "load_module_manifest",
]
