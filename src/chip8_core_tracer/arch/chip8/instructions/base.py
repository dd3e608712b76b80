# src/chip8_core_tracer/arch/chip8/instructions/base.py
"""
CHIP-8命令実装用の共通ユーティリティ。
"""
import random
from dataclasses import dataclass, field

from chip8_core_tracer.core.snapshot import Operation
from chip8_core_tracer.transport.bus import Bus
from chip8_core_tracer.arch.chip8.state import ADDRESS_MASK

# @intent:responsibility 歴史的な実装差異（Quirk）を再現するための切り替えフラグを保持します。
@dataclass
class QuirkFlags:
    shift_uses_vy: bool = False # 8XY6/8XYE: VyをシフトしてVxに格納する
    increment_index_on_block_transfer: bool = False # FX55/FX65: 転送後にIを X+1 進める

# @intent:responsibility 実行ステップに外部から明示的に渡される依存（Quirk設定、乱数源）をまとめます。
# @intent:rationale 乱数源を注入することで、シード固定による再現可能な実行を可能にします。
@dataclass
class ExecutionContext:
    quirks: QuirkFlags = field(default_factory=QuirkFlags)
    rng: random.Random = field(default_factory=random.Random)

# --- Operation生成ヘルパー ---
# @intent:utility_function 命令のOperationを生成します。operandsは表示用の文字列です。
def make_operation(opcode: int, mnemonic: str, pattern: str, *operands: str) -> Operation:
    return Operation(
        opcode_hex=f"{opcode:04X}",
        mnemonic=mnemonic,
        operands=list(operands),
        pattern=pattern,
        opcode=opcode,
    )

def reg(index: int) -> str:
    return f"V{index:X}"

def addr(value: int) -> str:
    return f"${value:03X}"

def imm(value: int) -> str:
    return f"#${value:02X}"

# @intent:utility_function 12ビットのアドレス空間内で折り返したアドレスを返します。
def wrap_address(address: int) -> int:
    return address & ADDRESS_MASK

# @intent:utility_function Iレジスタ + offset の位置からメモリを読み出します。
def read_indexed(bus: Bus, index: int, offset: int) -> int:
    return bus.read(wrap_address(index + offset))

def write_indexed(bus: Bus, index: int, offset: int, value: int) -> None:
    bus.write(wrap_address(index + offset), value & 0xFF)
