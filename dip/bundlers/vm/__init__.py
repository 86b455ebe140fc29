"""Version managers — bundlers that install pinned runtime versions."""

from dip.bundlers.vm.base import VersionManager
from dip.bundlers.vm.nodejs import NodeJS
from dip.bundlers.vm.tailwindcss import TailwindCSS

__all__ = [
    "NodeJS",
    "TailwindCSS",
    "VersionManager",
]
