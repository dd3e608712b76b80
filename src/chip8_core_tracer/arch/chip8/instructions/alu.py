# src/chip8_core_tracer/arch/chip8/instructions/alu.py
"""
算術論理演算命令の実装。

VFへの書き込み順序は命令ごとに異なります。ADDは結果を格納した後にフラグを書き込み、
SUB/SUBN/SHR/SHLはフラグを先に書き込んでから結果を格納します。
そのためVxにVFを指定した場合、前者はフラグが、後者は演算結果が最終値として残ります。
"""
from chip8_core_tracer.core.snapshot import Operation
from chip8_core_tracer.transport.bus import Bus
from chip8_core_tracer.arch.chip8.state import Chip8CpuState
from .base import ExecutionContext, make_operation, reg, imm

def _xy(opcode: int):
    return reg((opcode >> 8) & 0xF), reg((opcode >> 4) & 0xF)

# --- LD Vx, byte (6XKK) ---
def decode_ld_byte(opcode: int) -> Operation:
    return make_operation(opcode, "LD", "6XKK", reg((opcode >> 8) & 0xF), imm(opcode & 0xFF))

def execute_ld_byte(state: Chip8CpuState, bus: Bus, op: Operation, context: ExecutionContext) -> None:
    state.v[op.x] = op.kk

# --- ADD Vx, byte (7XKK) ---
def decode_add_byte(opcode: int) -> Operation:
    return make_operation(opcode, "ADD", "7XKK", reg((opcode >> 8) & 0xF), imm(opcode & 0xFF))

# @intent:responsibility Vxに即値を加算します。桁あふれは折り返し、VFは変更しません。
def execute_add_byte(state: Chip8CpuState, bus: Bus, op: Operation, context: ExecutionContext) -> None:
    state.v[op.x] = (state.v[op.x] + op.kk) & 0xFF

# --- LD Vx, Vy (8XY0) ---
def decode_ld_reg(opcode: int) -> Operation:
    return make_operation(opcode, "LD", "8XY0", *_xy(opcode))

def execute_ld_reg(state: Chip8CpuState, bus: Bus, op: Operation, context: ExecutionContext) -> None:
    state.v[op.x] = state.v[op.y]

# --- OR Vx, Vy (8XY1) ---
def decode_or(opcode: int) -> Operation:
    return make_operation(opcode, "OR", "8XY1", *_xy(opcode))

def execute_or(state: Chip8CpuState, bus: Bus, op: Operation, context: ExecutionContext) -> None:
    state.v[op.x] |= state.v[op.y]

# --- AND Vx, Vy (8XY2) ---
def decode_and(opcode: int) -> Operation:
    return make_operation(opcode, "AND", "8XY2", *_xy(opcode))

def execute_and(state: Chip8CpuState, bus: Bus, op: Operation, context: ExecutionContext) -> None:
    state.v[op.x] &= state.v[op.y]

# --- XOR Vx, Vy (8XY3) ---
def decode_xor(opcode: int) -> Operation:
    return make_operation(opcode, "XOR", "8XY3", *_xy(opcode))

def execute_xor(state: Chip8CpuState, bus: Bus, op: Operation, context: ExecutionContext) -> None:
    state.v[op.x] ^= state.v[op.y]

# --- ADD Vx, Vy (8XY4) ---
def decode_add_reg(opcode: int) -> Operation:
    return make_operation(opcode, "ADD", "8XY4", *_xy(opcode))

# @intent:responsibility Vx + Vy の結果をVxに格納し、255を超えた場合VF=1（キャリー）とします。
def execute_add_reg(state: Chip8CpuState, bus: Bus, op: Operation, context: ExecutionContext) -> None:
    res = state.v[op.x] + state.v[op.y]
    state.v[op.x] = res & 0xFF
    state.vf = 1 if res > 0xFF else 0

# --- SUB Vx, Vy (8XY5) ---
def decode_sub(opcode: int) -> Operation:
    return make_operation(opcode, "SUB", "8XY5", *_xy(opcode))

# @intent:responsibility Vx - Vy の結果をVxに格納します。ボローが発生しない（Vx >= Vy）場合VF=1です。
def execute_sub(state: Chip8CpuState, bus: Bus, op: Operation, context: ExecutionContext) -> None:
    vx, vy = state.v[op.x], state.v[op.y]
    state.vf = 0 if vy > vx else 1
    state.v[op.x] = (vx - vy) & 0xFF

# --- SHR Vx {, Vy} (8XY6) ---
def decode_shr(opcode: int) -> Operation:
    return make_operation(opcode, "SHR", "8XY6", *_xy(opcode))

# @intent:responsibility 1ビット右シフトし、押し出された最下位ビットをVFに格納します。
# @intent:rationale shift_uses_vyが有効な場合はVyをシフトした結果をVxに書き込みます。
def execute_shr(state: Chip8CpuState, bus: Bus, op: Operation, context: ExecutionContext) -> None:
    source = state.v[op.y] if context.quirks.shift_uses_vy else state.v[op.x]
    state.vf = source & 0x01
    state.v[op.x] = source >> 1

# --- SUBN Vx, Vy (8XY7) ---
def decode_subn(opcode: int) -> Operation:
    return make_operation(opcode, "SUBN", "8XY7", *_xy(opcode))

# @intent:responsibility Vy - Vx の結果をVxに格納します。ボローが発生しない（Vy >= Vx）場合VF=1です。
def execute_subn(state: Chip8CpuState, bus: Bus, op: Operation, context: ExecutionContext) -> None:
    vx, vy = state.v[op.x], state.v[op.y]
    state.vf = 0 if vx > vy else 1
    state.v[op.x] = (vy - vx) & 0xFF

# --- SHL Vx {, Vy} (8XYE) ---
def decode_shl(opcode: int) -> Operation:
    return make_operation(opcode, "SHL", "8XYE", *_xy(opcode))

def execute_shl(state: Chip8CpuState, bus: Bus, op: Operation, context: ExecutionContext) -> None:
    source = state.v[op.y] if context.quirks.shift_uses_vy else state.v[op.x]
    state.vf = (source & 0x80) >> 7
    state.v[op.x] = (source << 1) & 0xFF

# --- RND Vx, byte (CXKK) ---
def decode_rnd(opcode: int) -> Operation:
    return make_operation(opcode, "RND", "CXKK", reg((opcode >> 8) & 0xF), imm(opcode & 0xFF))

# @intent:responsibility 注入された乱数源から得た1バイトと即値のANDをVxに格納します。
def execute_rnd(state: Chip8CpuState, bus: Bus, op: Operation, context: ExecutionContext) -> None:
    state.v[op.x] = context.rng.randrange(0x100) & op.kk
