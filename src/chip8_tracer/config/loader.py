import yaml
from typing import Dict, Any, Optional
from .models import MachineConfig, QuirkConfig

_QUIRK_KEYS = ("shift_uses_vy", "key_wait_on_release", "load_store_increments_index")

class ConfigLoader:
    def load_from_file(self, path: str) -> MachineConfig:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
        return self._parse_config(data)

    def load_from_string(self, text: str) -> MachineConfig:
        return self._parse_config(yaml.safe_load(text))

    def _parse_config(self, data: Optional[Dict[str, Any]]) -> MachineConfig:
        if data is None:
            return MachineConfig()
        if not isinstance(data, dict):
            raise ValueError(f"Config root must be a mapping, got {type(data).__name__}")

        # Parse Quirks
        quirks_data = data.get("quirks", {}) or {}
        if not isinstance(quirks_data, dict):
            raise ValueError("'quirks' must be a mapping")
        unknown = set(quirks_data) - set(_QUIRK_KEYS)
        if unknown:
            raise ValueError(f"Unknown quirk(s): {', '.join(sorted(unknown))}")
        quirks = QuirkConfig(**{key: self._parse_bool(key, value) for key, value in quirks_data.items()})

        seed = data.get("seed")
        return MachineConfig(
            quirks=quirks,
            seed=self._parse_int(seed) if seed is not None else None
        )

    def _parse_bool(self, key: str, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        raise ValueError(f"Quirk '{key}' must be a boolean: {value}")

    def _parse_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError(f"Invalid integer format: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            if value.startswith("0x"):
                return int(value, 16)
            return int(value)
        raise ValueError(f"Invalid integer format: {value}")
