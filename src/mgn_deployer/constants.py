"""Protocol constants keyed by environment (chain id)."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from .errors import UnknownEnvironmentError

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = ("team", "WETH", "whitelistTokens", "emergencyCouncil", "feeManager")


@dataclass(frozen=True)
class WrappedNativeDetail:
    name: str
    symbol: str


@dataclass(frozen=True)
class ProtocolConstants:
    """Addresses and parameters the deployment graph reads."""

    team: str
    weth: str
    whitelist_tokens: Tuple[str, ...]
    emergency_council: str
    fee_manager: str
    wrapped_native: Optional[WrappedNativeDetail] = None

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "ProtocolConstants":
        wrapped = payload.get("wrappedNative")
        return cls(
            team=payload["team"],
            weth=payload["WETH"],
            whitelist_tokens=tuple(payload.get("whitelistTokens") or ()),
            emergency_council=payload["emergencyCouncil"],
            fee_manager=payload["feeManager"],
            wrapped_native=WrappedNativeDetail(**wrapped) if wrapped else None,
        )


class ProtocolConstantsProvider:
    """Reads the constants file (``config/values.json`` layout)."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self._payload: Optional[Dict[str, Any]] = None

    def _load(self) -> Dict[str, Any]:
        if self._payload is None:
            if not self.path.is_file():
                logger.warning("Constants file %s not found", self.path)
                self._payload = {}
            else:
                with self.path.open("r", encoding="utf-8") as handle:
                    self._payload = json.load(handle)
        return self._payload

    def environments(self) -> Tuple[str, ...]:
        return tuple(key for key in self._load() if not key.startswith("_"))

    def get(self, environment: str) -> ProtocolConstants:
        payload = self._load().get(str(environment))
        if not isinstance(payload, dict):
            known = ", ".join(self.environments()) or "none"
            raise UnknownEnvironmentError(
                str(environment), f"not present in {self.path} (configured chain ids: {known})"
            )
        # whitelistTokens 可以为空列表，但必须存在
        missing = [
            name for name in _REQUIRED_FIELDS
            if name not in payload or (name != "whitelistTokens" and not payload[name])
        ]
        if missing:
            raise UnknownEnvironmentError(str(environment), f"missing {', '.join(missing)}")
        return ProtocolConstants.from_dict(payload)
