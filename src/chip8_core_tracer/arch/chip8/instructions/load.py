# src/chip8_core_tracer/arch/chip8/instructions/load.py
"""
転送命令（Iレジスタ、タイマー、キー入力、BCD、レジスタブロック転送）の実装。
"""
from chip8_core_tracer.core.snapshot import Operation
from chip8_core_tracer.transport.bus import Bus
from chip8_core_tracer.arch.chip8.state import Chip8CpuState, ADDRESS_MASK, GLYPH_SIZE
from .base import ExecutionContext, make_operation, reg, addr, read_indexed, write_indexed

def _x(opcode: int) -> str:
    return reg((opcode >> 8) & 0xF)

# --- LD I, addr (ANNN) ---
def decode_ld_i(opcode: int) -> Operation:
    return make_operation(opcode, "LD", "ANNN", "I", addr(opcode & 0x0FFF))

def execute_ld_i(state: Chip8CpuState, bus: Bus, op: Operation, context: ExecutionContext) -> None:
    state.i = op.nnn

# --- LD Vx, DT (FX07) ---
def decode_ld_vx_dt(opcode: int) -> Operation:
    return make_operation(opcode, "LD", "FX07", _x(opcode), "DT")

def execute_ld_vx_dt(state: Chip8CpuState, bus: Bus, op: Operation, context: ExecutionContext) -> None:
    state.v[op.x] = state.dt

# --- LD Vx, K (FX0A) ---
def decode_ld_vx_key(opcode: int) -> Operation:
    return make_operation(opcode, "LD", "FX0A", _x(opcode), "K")

# @intent:responsibility キー入力を待ちます。キーが押されていなければPCを2戻し、次のstepで同じ命令を再実行します。
# @intent:rationale 呼び出し元をブロックせず、PCの巻き戻しだけで待ち状態を表現します。
def execute_ld_vx_key(state: Chip8CpuState, bus: Bus, op: Operation, context: ExecutionContext) -> None:
    if state.key is None:
        state.pc = (state.pc - op.length) & 0xFFFF
    else:
        state.v[op.x] = state.key

# --- LD DT, Vx (FX15) ---
def decode_ld_dt_vx(opcode: int) -> Operation:
    return make_operation(opcode, "LD", "FX15", "DT", _x(opcode))

def execute_ld_dt_vx(state: Chip8CpuState, bus: Bus, op: Operation, context: ExecutionContext) -> None:
    state.dt = state.v[op.x]

# --- LD ST, Vx (FX18) ---
def decode_ld_st_vx(opcode: int) -> Operation:
    return make_operation(opcode, "LD", "FX18", "ST", _x(opcode))

def execute_ld_st_vx(state: Chip8CpuState, bus: Bus, op: Operation, context: ExecutionContext) -> None:
    state.st = state.v[op.x]

# --- ADD I, Vx (FX1E) ---
def decode_add_i(opcode: int) -> Operation:
    return make_operation(opcode, "ADD", "FX1E", "I", _x(opcode))

# @intent:responsibility IにVxを加算します。マスク前の和が0xFFFを超えた場合VF=1、そうでなければVF=0です。
def execute_add_i(state: Chip8CpuState, bus: Bus, op: Operation, context: ExecutionContext) -> None:
    total = state.i + state.v[op.x]
    state.vf = 1 if total > ADDRESS_MASK else 0
    state.i = total & ADDRESS_MASK

# --- LD F, Vx (FX29) ---
def decode_ld_glyph(opcode: int) -> Operation:
    return make_operation(opcode, "LD", "FX29", "F", _x(opcode))

def execute_ld_glyph(state: Chip8CpuState, bus: Bus, op: Operation, context: ExecutionContext) -> None:
    state.i = (state.v[op.x] * GLYPH_SIZE) & ADDRESS_MASK

# --- LD B, Vx (FX33) ---
def decode_ld_bcd(opcode: int) -> Operation:
    return make_operation(opcode, "LD", "FX33", "B", _x(opcode))

# @intent:responsibility Vxの百の位、十の位、一の位をそれぞれ I, I+1, I+2 に格納します。
def execute_ld_bcd(state: Chip8CpuState, bus: Bus, op: Operation, context: ExecutionContext) -> None:
    value = state.v[op.x]
    write_indexed(bus, state.i, 0, value // 100)
    write_indexed(bus, state.i, 1, (value // 10) % 10)
    write_indexed(bus, state.i, 2, value % 10)

# --- LD [I], Vx (FX55) ---
def decode_store_block(opcode: int) -> Operation:
    return make_operation(opcode, "LD", "FX55", "[I]", _x(opcode))

# @intent:responsibility V0..Vx を I から始まるメモリに書き込みます。
def execute_store_block(state: Chip8CpuState, bus: Bus, op: Operation, context: ExecutionContext) -> None:
    for index in range(op.x + 1):
        write_indexed(bus, state.i, index, state.v[index])
    if context.quirks.increment_index_on_block_transfer:
        state.i = (state.i + op.x + 1) & ADDRESS_MASK

# --- LD Vx, [I] (FX65) ---
def decode_load_block(opcode: int) -> Operation:
    return make_operation(opcode, "LD", "FX65", _x(opcode), "[I]")

# @intent:responsibility I から始まるメモリを V0..Vx に読み込みます。
def execute_load_block(state: Chip8CpuState, bus: Bus, op: Operation, context: ExecutionContext) -> None:
    for index in range(op.x + 1):
        state.v[index] = read_indexed(bus, state.i, index)
    if context.quirks.increment_index_on_block_transfer:
        state.i = (state.i + op.x + 1) & ADDRESS_MASK
