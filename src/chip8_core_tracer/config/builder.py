import random
from typing import Tuple
from chip8_core_tracer.transport.bus import Bus, RAM
from chip8_core_tracer.arch.chip8.cpu import Chip8Cpu
from chip8_core_tracer.arch.chip8.state import MEMORY_SIZE
from chip8_core_tracer.arch.chip8.instructions import QuirkFlags
from chip8_core_tracer.debugger.debugger import Debugger
from .models import SystemConfig

# @intent:responsibility システム構成（Config）に基づいて、Bus、RAM、CPUを生成・接続し、Quirk設定と乱数シードを適用します。
class SystemBuilder:
    def build_system(self, config: SystemConfig) -> Tuple[Chip8Cpu, Bus]:
        if config.architecture.upper() != "CHIP8":
            raise ValueError(f"Unsupported architecture: {config.architecture}")

        bus = Bus()
        bus.register_device(0x000, MEMORY_SIZE - 1, RAM(MEMORY_SIZE))

        quirks = QuirkFlags(
            shift_uses_vy=config.quirks.shift_uses_vy,
            increment_index_on_block_transfer=config.quirks.increment_index_on_block_transfer,
        )
        # seedがNoneの場合、random.Randomはシステムのエントロピーで初期化される
        cpu = Chip8Cpu(bus, rng=random.Random(config.seed), quirks=quirks)
        return cpu, bus

    # @intent:responsibility 構築済みのCPUに、設定の1フレームあたりの命令数を適用したDebuggerを接続します。
    def build_debugger(self, config: SystemConfig, cpu: Chip8Cpu) -> Debugger:
        return Debugger(cpu, instructions_per_frame=config.instructions_per_frame)
