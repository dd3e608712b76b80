# src/chip8_core_tracer/arch/chip8/instructions/display.py
"""
画面命令（クリア、スプライト描画）の実装。
"""
from chip8_core_tracer.core.snapshot import Operation
from chip8_core_tracer.transport.bus import Bus
from chip8_core_tracer.arch.chip8.state import Chip8CpuState, DISPLAY_WIDTH, DISPLAY_HEIGHT
from .base import ExecutionContext, make_operation, reg, read_indexed

# --- CLS (00E0) ---
def decode_cls(opcode: int) -> Operation:
    return make_operation(opcode, "CLS", "00E0")

def execute_cls(state: Chip8CpuState, bus: Bus, op: Operation, context: ExecutionContext) -> None:
    state.display[:] = bytes(len(state.display))

# --- DRW Vx, Vy, nibble (DXYN) ---
def decode_drw(opcode: int) -> Operation:
    return make_operation(
        opcode, "DRW", "DXYN", reg((opcode >> 8) & 0xF), reg((opcode >> 4) & 0xF), str(opcode & 0xF)
    )

# @intent:responsibility Iから読み出したNバイトのスプライトを (Vx, Vy) にXOR描画します。
# @intent:rationale 各行・各列は画面端で折り返します。1→0に反転した画素があればVF=1となります。
def execute_drw(state: Chip8CpuState, bus: Bus, op: Operation, context: ExecutionContext) -> None:
    origin_x = state.v[op.x] % DISPLAY_WIDTH
    origin_y = state.v[op.y] % DISPLAY_HEIGHT
    state.vf = 0

    for row in range(op.n):
        sprite = read_indexed(bus, state.i, row)
        y = (origin_y + row) % DISPLAY_HEIGHT
        for bit in range(8):
            if not sprite & (0x80 >> bit):
                continue
            offset = y * DISPLAY_WIDTH + (origin_x + bit) % DISPLAY_WIDTH
            if state.display[offset]:
                state.display[offset] = 0
                state.vf = 1
            else:
                state.display[offset] = 1
