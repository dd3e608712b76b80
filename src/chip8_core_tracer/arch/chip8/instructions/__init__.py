# src/chip8_core_tracer/arch/chip8/instructions/__init__.py
"""
CHIP-8命令セット実装パッケージ。

decode_opcodeはオペコードのみから決まる純粋関数であり、execute_instructionは
状態・バス・実行コンテキストを明示的に受け取ります。
"""
import logging

from chip8_core_tracer.transport.bus import Bus
from chip8_core_tracer.core.snapshot import Operation
from chip8_core_tracer.arch.chip8.state import Chip8CpuState
from .base import ExecutionContext, QuirkFlags, make_operation
from .maps import DECODE_MAP, EXECUTE_MAP, decode_key

logger = logging.getLogger(__name__)

UNKNOWN = "UNKNOWN"

# @intent:responsibility 16ビットのオペコードをデコードします。
def decode_opcode(opcode: int) -> Operation:
    """
    CHIP-8のオペコードをデコードし、Operationオブジェクトを返します。
    未定義のオペコードは mnemonic="UNKNOWN" のOperationになります。
    """
    opcode &= 0xFFFF
    decoder = DECODE_MAP.get(decode_key(opcode))
    if decoder:
        return decoder(opcode)
    return make_operation(opcode, UNKNOWN, "", f"${opcode:04X}")

# @intent:responsibility デコードされたCHIP-8命令を実行します。
# @intent:post-condition 未定義命令は警告をログに記録し、何もしません（PCは既に進められています）。
def execute_instruction(operation: Operation, state: Chip8CpuState, bus: Bus, context: ExecutionContext) -> None:
    """
    デコードされたCHIP-8命令を実行し、VMの状態を変更します。
    """
    executor = EXECUTE_MAP.get(operation.pattern)
    if executor:
        executor(state, bus, operation, context)
    else:
        logger.warning("Unknown instruction %s at %#05x", operation.opcode_hex, (state.pc - operation.length) & 0xFFFF)
