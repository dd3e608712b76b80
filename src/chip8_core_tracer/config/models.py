from dataclasses import dataclass, field
from typing import Optional

@dataclass
class QuirkConfig:
    shift_uses_vy: bool = False
    increment_index_on_block_transfer: bool = False

@dataclass
class SystemConfig:
    architecture: str = "CHIP8"
    quirks: QuirkConfig = field(default_factory=QuirkConfig)
    seed: Optional[int] = None # Noneの場合は非決定的な乱数源を使用
    instructions_per_frame: int = 10
