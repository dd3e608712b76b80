import yaml
from typing import Dict, Any, Optional
from .models import SystemConfig, QuirkConfig

class ConfigLoader:
    def load_from_file(self, path: str) -> SystemConfig:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
        return self._parse_config(data or {})

    def load_from_string(self, text: str) -> SystemConfig:
        return self._parse_config(yaml.safe_load(text) or {})

    def _parse_config(self, data: Dict[str, Any]) -> SystemConfig:
        if not isinstance(data, dict):
            raise ValueError(f"Config root must be a mapping, got {type(data).__name__}")

        arch = data.get("architecture", "CHIP8")

        quirks_data = data.get("quirks", {}) or {}
        quirks = QuirkConfig(
            shift_uses_vy=self._parse_bool(quirks_data.get("shift_uses_vy", False)),
            increment_index_on_block_transfer=self._parse_bool(
                quirks_data.get("increment_index_on_block_transfer", False)
            ),
        )

        instructions_per_frame = self._parse_int(data.get("instructions_per_frame", 10))
        if instructions_per_frame <= 0:
            raise ValueError(f"instructions_per_frame must be positive: {instructions_per_frame}")

        return SystemConfig(
            architecture=arch,
            quirks=quirks,
            seed=self._parse_optional_int(data.get("seed")),
            instructions_per_frame=instructions_per_frame,
        )

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

    def _parse_optional_int(self, value: Any) -> Optional[int]:
        if value is None:
            return None
        return self._parse_int(value)

    def _parse_bool(self, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        raise ValueError(f"Invalid boolean value: {value}")
