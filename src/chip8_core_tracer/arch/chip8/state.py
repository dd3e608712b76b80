# src/chip8_core_tracer/arch/chip8/state.py
"""
CHIP-8 VM固有の状態定義。
"""
from dataclasses import dataclass, field, replace
from typing import List, Optional

from chip8_core_tracer.core.state import CpuState

# @intent:constant メモリマップとディスプレイの寸法。
MEMORY_SIZE = 0x1000
PROGRAM_START = 0x200
MAX_PROGRAM_SIZE = MEMORY_SIZE - PROGRAM_START
ADDRESS_MASK = 0x0FFF
DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32
STACK_DEPTH = 16
REGISTER_COUNT = 16
FLAG = 0xF # VF: キャリー/ボロー/衝突フラグとして上書きされるレジスタ
GLYPH_SIZE = 5

# @intent:constant 0x000から配置される16進数字のグリフ（各5バイト、上位4ビットが1行分）。
GLYPH_SET = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0, # 0
    0x20, 0x60, 0x20, 0x20, 0x70, # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0, # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0, # 3
    0x90, 0x90, 0xF0, 0x10, 0x10, # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0, # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0, # 6
    0xF0, 0x10, 0x20, 0x40, 0x40, # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0, # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0, # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90, # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0, # B
    0xF0, 0x80, 0x80, 0x80, 0xF0, # C
    0xE0, 0x90, 0x90, 0x90, 0xE0, # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0, # E
    0xF0, 0x80, 0xF0, 0x80, 0x80, # F
])

# @intent:responsibility CHIP-8の全レジスタ、コールスタック、タイマー、キー入力、フレームバッファを保持します。
# @intent:rationale VFは通常の配列要素として保持し、特別扱いはフラグを書き込む命令側でのみ行います。
@dataclass
class Chip8CpuState(CpuState):
    """
    CHIP-8 VMの状態を保持するデータクラス。
    spはスタックに積まれている戻りアドレスの数（0..16）を表します。
    keyはNoneの場合「キー入力なし」を意味します。
    """
    pc: int = PROGRAM_START
    v: List[int] = field(default_factory=lambda: [0] * REGISTER_COUNT)
    i: int = 0x000
    stack: List[int] = field(default_factory=lambda: [0] * STACK_DEPTH)
    dt: int = 0 # Delay Timer
    st: int = 0 # Sound Timer
    key: Optional[int] = None
    display: bytearray = field(default_factory=lambda: bytearray(DISPLAY_WIDTH * DISPLAY_HEIGHT))

    @property
    def vf(self) -> int:
        return self.v[FLAG]

    @vf.setter
    def vf(self, value: int) -> None:
        self.v[FLAG] = value & 0xFF

    # @intent:responsibility リスト/バッファを共有しない独立したコピーを返します。
    def copy(self) -> 'Chip8CpuState':
        return replace(
            self,
            v=list(self.v),
            stack=list(self.stack),
            display=bytearray(self.display),
        )

    # @intent:responsibility 名前（"V0".."VF", "I", "PC", "SP", "DT", "ST"）でレジスタ値を取得します。
    def get_register(self, name: str) -> Optional[int]:
        name = name.upper()
        if len(name) == 2 and name[0] == "V":
            try:
                return self.v[int(name[1], 16)]
            except ValueError:
                return None
        return {
            "I": self.i, "PC": self.pc, "SP": self.sp, "DT": self.dt, "ST": self.st
        }.get(name)
