"""Hardhat artifact lookup and library linking."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..errors import ArtifactError

logger = logging.getLogger(__name__)


@dataclass
class ContractArtifact:
    """ABI and creation bytecode of one compiled contract."""

    name: str
    abi: List[Dict[str, Any]]
    bytecode: str
    # {source_file: {library_name: [{"start": int, "length": int}, ...]}}
    link_references: Dict[str, Dict[str, List[Dict[str, int]]]] = field(default_factory=dict)

    @property
    def needs_linking(self) -> bool:
        return any(self.link_references.values())

    def required_libraries(self) -> List[str]:
        names: List[str] = []
        for libraries in self.link_references.values():
            for name in libraries:
                if name not in names:
                    names.append(name)
        return names

    def linked_bytecode(self, libraries: Optional[Dict[str, str]] = None) -> str:
        """Return bytecode with every library placeholder replaced by its address."""
        libraries = libraries or {}
        missing = [name for name in self.required_libraries() if name not in libraries]
        if missing:
            raise ArtifactError(f"{self.name} needs libraries: {', '.join(missing)}")

        code = self.bytecode[2:] if self.bytecode.startswith("0x") else self.bytecode
        for references in self.link_references.values():
            for library, offsets in references.items():
                address = libraries[library].lower()
                address = address[2:] if address.startswith("0x") else address
                if len(address) != 40:
                    raise ArtifactError(f"Invalid address for library {library}: {libraries[library]}")
                for offset in offsets:
                    # offsets 以字节为单位，十六进制字符串中需要乘 2
                    start = offset["start"] * 2
                    end = start + offset["length"] * 2
                    code = code[:start] + address + code[end:]
        return "0x" + code


class ArtifactRegistry:
    """Finds ``<Name>.json`` artifacts under a Hardhat ``artifacts`` tree."""

    def __init__(self, root: Union[str, Path]) -> None:
        self.root = Path(root)
        self._index: Optional[Dict[str, Path]] = None
        self._cache: Dict[str, ContractArtifact] = {}

    def _build_index(self) -> Dict[str, Path]:
        index: Dict[str, Path] = {}
        if not self.root.is_dir():
            return index
        for path in sorted(self.root.rglob("*.json")):
            if path.name.endswith(".dbg.json") or "build-info" in path.parts:
                continue
            name = path.stem
            if name in index:
                logger.debug("Artifact %s found twice, keeping %s", name, index[name])
                continue
            index[name] = path
        return index

    def get(self, name: str) -> ContractArtifact:
        if name in self._cache:
            return self._cache[name]
        if self._index is None:
            self._index = self._build_index()
        path = self._index.get(name)
        if path is None:
            raise ArtifactError(f"Artifact '{name}' not found under {self.root}")

        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ArtifactError(f"Cannot read artifact {path}: {exc}") from exc
        if "abi" not in payload or "bytecode" not in payload:
            raise ArtifactError(f"{path} is not a contract artifact")

        artifact = ContractArtifact(
            name=payload.get("contractName", name),
            abi=payload["abi"],
            bytecode=payload["bytecode"],
            link_references=payload.get("linkReferences") or {},
        )
        self._cache[name] = artifact
        return artifact
