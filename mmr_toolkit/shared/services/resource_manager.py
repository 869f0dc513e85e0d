"""Contract ABIs shipped in mmr_toolkit/resources/abi."""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from mmr_toolkit.shared.exceptions import ConfigurationException

Abi = List[Dict[str, Any]]


class ResourceManager:
    """Looks up and caches packaged ABI files by name"""

    def __init__(self, resources_root: Optional[Path] = None):
        self.resources_root = resources_root or (
            Path(__file__).resolve().parents[2] / "resources"
        )
        self._abis: Dict[str, Abi] = {}

    def abi_path(self, name: str) -> Path:
        abi_dir = (self.resources_root / "abi").resolve()
        path = (abi_dir / f"{name}.json").resolve()
        # Names like "../x" would escape the ABI directory
        if path.parent != abi_dir:
            raise ConfigurationException(f"Invalid ABI name: {name}")
        return path

    def load_abi(self, name: str) -> Abi:
        if name not in self._abis:
            path = self.abi_path(name)
            if not path.is_file():
                raise ConfigurationException(f"ABI {name} not found at {path}")
            with open(path) as f:
                self._abis[name] = json.load(f)
        return self._abis[name]

    def function_names(self, name: str) -> List[str]:
        """Names of the functions an ABI declares."""
        return [
            entry["name"]
            for entry in self.load_abi(name)
            if entry.get("type") == "function"
        ]


resource_manager = ResourceManager()
