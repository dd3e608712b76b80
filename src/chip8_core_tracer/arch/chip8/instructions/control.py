# src/chip8_core_tracer/arch/chip8/instructions/control.py
"""
制御命令（ジャンプ、サブルーチン、条件スキップ）の実装。
"""
import logging

from chip8_core_tracer.core.snapshot import Operation
from chip8_core_tracer.transport.bus import Bus
from chip8_core_tracer.arch.chip8.state import Chip8CpuState, STACK_DEPTH
from chip8_core_tracer.arch.chip8.errors import StackOverflowError, StackUnderflowError
from .base import ExecutionContext, make_operation, reg, addr, imm

logger = logging.getLogger(__name__)

# @intent:utility_function 次の命令をスキップします（PCは既に次の命令を指しているため、さらに2進める）。
def skip_next(state: Chip8CpuState) -> None:
    state.pc = (state.pc + 2) & 0xFFFF

def _faulting_pc(state: Chip8CpuState, op: Operation) -> int:
    return (state.pc - op.length) & 0xFFFF

# --- RET (00EE) ---
def decode_ret(opcode: int) -> Operation:
    return make_operation(opcode, "RET", "00EE")

# @intent:responsibility スタックから戻りアドレスをポップしてPCに設定します。
# @intent:pre-condition スタックが空の場合はStackUnderflowErrorを送出し、状態を変更しません。
def execute_ret(state: Chip8CpuState, bus: Bus, op: Operation, context: ExecutionContext) -> None:
    if state.sp == 0:
        pc = _faulting_pc(state, op)
        logger.error("Stack underflow: RET at %#05x with an empty stack", pc)
        raise StackUnderflowError(f"RET at {pc:#05x} with an empty call stack.", pc)
    state.sp -= 1
    state.pc = state.stack[state.sp]

# --- JP addr (1NNN) ---
def decode_jp(opcode: int) -> Operation:
    return make_operation(opcode, "JP", "1NNN", addr(opcode & 0x0FFF))

def execute_jp(state: Chip8CpuState, bus: Bus, op: Operation, context: ExecutionContext) -> None:
    state.pc = op.nnn

# --- CALL addr (2NNN) ---
def decode_call(opcode: int) -> Operation:
    return make_operation(opcode, "CALL", "2NNN", addr(opcode & 0x0FFF))

# @intent:responsibility 戻りアドレス（次の命令）をスタックにプッシュしてからジャンプします。
# @intent:pre-condition スタックが満杯（16段）の場合はStackOverflowErrorを送出し、状態を変更しません。
def execute_call(state: Chip8CpuState, bus: Bus, op: Operation, context: ExecutionContext) -> None:
    if state.sp >= STACK_DEPTH:
        pc = _faulting_pc(state, op)
        logger.error("Stack overflow: CALL at %#05x with %d return addresses stacked", pc, state.sp)
        raise StackOverflowError(f"CALL at {pc:#05x} exceeds the {STACK_DEPTH}-entry call stack.", pc)
    state.stack[state.sp] = state.pc
    state.sp += 1
    state.pc = op.nnn

# --- SE Vx, byte (3XKK) ---
def decode_se_byte(opcode: int) -> Operation:
    return make_operation(opcode, "SE", "3XKK", reg((opcode >> 8) & 0xF), imm(opcode & 0xFF))

def execute_se_byte(state: Chip8CpuState, bus: Bus, op: Operation, context: ExecutionContext) -> None:
    if state.v[op.x] == op.kk:
        skip_next(state)

# --- SNE Vx, byte (4XKK) ---
def decode_sne_byte(opcode: int) -> Operation:
    return make_operation(opcode, "SNE", "4XKK", reg((opcode >> 8) & 0xF), imm(opcode & 0xFF))

def execute_sne_byte(state: Chip8CpuState, bus: Bus, op: Operation, context: ExecutionContext) -> None:
    if state.v[op.x] != op.kk:
        skip_next(state)

# --- SE Vx, Vy (5XY0) ---
def decode_se_reg(opcode: int) -> Operation:
    return make_operation(opcode, "SE", "5XY0", reg((opcode >> 8) & 0xF), reg((opcode >> 4) & 0xF))

def execute_se_reg(state: Chip8CpuState, bus: Bus, op: Operation, context: ExecutionContext) -> None:
    if state.v[op.x] == state.v[op.y]:
        skip_next(state)

# --- SNE Vx, Vy (9XY0) ---
def decode_sne_reg(opcode: int) -> Operation:
    return make_operation(opcode, "SNE", "9XY0", reg((opcode >> 8) & 0xF), reg((opcode >> 4) & 0xF))

def execute_sne_reg(state: Chip8CpuState, bus: Bus, op: Operation, context: ExecutionContext) -> None:
    if state.v[op.x] != state.v[op.y]:
        skip_next(state)

# --- JP V0, addr (BNNN) ---
def decode_jp_v0(opcode: int) -> Operation:
    return make_operation(opcode, "JP", "BNNN", "V0", addr(opcode & 0x0FFF))

def execute_jp_v0(state: Chip8CpuState, bus: Bus, op: Operation, context: ExecutionContext) -> None:
    state.pc = (op.nnn + state.v[0]) & 0xFFFF

# --- SKP Vx (EX9E) ---
def decode_skp(opcode: int) -> Operation:
    return make_operation(opcode, "SKP", "EX9E", reg((opcode >> 8) & 0xF))

# @intent:responsibility 現在押されているキーがVxと一致する場合に次の命令をスキップします。
def execute_skp(state: Chip8CpuState, bus: Bus, op: Operation, context: ExecutionContext) -> None:
    if state.key is not None and state.key == state.v[op.x]:
        skip_next(state)

# --- SKNP Vx (EXA1) ---
def decode_sknp(opcode: int) -> Operation:
    return make_operation(opcode, "SKNP", "EXA1", reg((opcode >> 8) & 0xF))

def execute_sknp(state: Chip8CpuState, bus: Bus, op: Operation, context: ExecutionContext) -> None:
    if state.key is None or state.key != state.v[op.x]:
        skip_next(state)
