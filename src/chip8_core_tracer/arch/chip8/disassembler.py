# src/chip8_core_tracer/arch/chip8/disassembler.py
"""
CHIP-8 Disassembler

メモリ上のバイナリデータを解析し、CHIP-8のニーモニックに変換します。
Instruction Layerのデコードロジックを再利用しますが、バスアクセスログを汚さないように
peek（ログなし読み込み）のみを使用します。
"""
from typing import List, Tuple

from chip8_core_tracer.transport.bus import Bus
from chip8_core_tracer.arch.chip8.state import MEMORY_SIZE
from chip8_core_tracer.arch.chip8.instructions import decode_opcode

# @intent:responsibility 指定されたメモリ範囲を逆アセンブルし、表示用データを生成します。
def disassemble(bus: Bus, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
    """
    指定された範囲のメモリを2バイト単位で逆アセンブルします。

    Returns:
        List of (address, hex_bytes, mnemonic) tuples.
    """
    result = []
    current_addr = start_addr
    end_addr = start_addr + length

    # 命令は2バイト固定のため、末尾の半端な1バイトは対象外とする
    while current_addr + 1 < end_addr and current_addr + 1 < MEMORY_SIZE:
        high = bus.peek(current_addr)
        low = bus.peek(current_addr + 1)
        operation = decode_opcode((high << 8) | low)

        mnemonic_str = operation.mnemonic
        if operation.operands:
            mnemonic_str += " " + ", ".join(operation.operands)

        result.append((current_addr, f"{high:02X} {low:02X}", mnemonic_str))
        current_addr += operation.length

    return result
