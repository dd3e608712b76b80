# src/chip8_core_tracer/arch/chip8/instructions/maps.py
"""
オペコードと命令実装のマッピング定義。
"""
from typing import Optional, Tuple

from . import load
from . import alu
from . import control
from . import display

# @intent:utility_function デコードテーブルの検索キー (上位4ビット, 下位の識別フィールド) を返します。
# @intent:rationale 命令ファミリーごとに、命令を識別するフィールドの位置が異なります。
def decode_key(opcode: int) -> Tuple[int, Optional[int]]:
    family = (opcode >> 12) & 0xF
    if family == 0x0:
        return family, opcode & 0x0FFF
    if family in (0x5, 0x8, 0x9):
        return family, opcode & 0x000F
    if family in (0xE, 0xF):
        return family, opcode & 0x00FF
    return family, None

# @intent:map 検索キーからデコード関数へのマッピングテーブル。
DECODE_MAP = {
    # Display
    (0x0, 0x0E0): display.decode_cls,
    (0xD, None): display.decode_drw,

    # Control
    (0x0, 0x0EE): control.decode_ret,
    (0x1, None): control.decode_jp,
    (0x2, None): control.decode_call,
    (0x3, None): control.decode_se_byte,
    (0x4, None): control.decode_sne_byte,
    (0x5, 0x0): control.decode_se_reg,
    (0x9, 0x0): control.decode_sne_reg,
    (0xB, None): control.decode_jp_v0,
    (0xE, 0x9E): control.decode_skp,
    (0xE, 0xA1): control.decode_sknp,

    # ALU
    (0x6, None): alu.decode_ld_byte,
    (0x7, None): alu.decode_add_byte,
    (0x8, 0x0): alu.decode_ld_reg,
    (0x8, 0x1): alu.decode_or,
    (0x8, 0x2): alu.decode_and,
    (0x8, 0x3): alu.decode_xor,
    (0x8, 0x4): alu.decode_add_reg,
    (0x8, 0x5): alu.decode_sub,
    (0x8, 0x6): alu.decode_shr,
    (0x8, 0x7): alu.decode_subn,
    (0x8, 0xE): alu.decode_shl,
    (0xC, None): alu.decode_rnd,

    # Load
    (0xA, None): load.decode_ld_i,
    (0xF, 0x07): load.decode_ld_vx_dt,
    (0xF, 0x0A): load.decode_ld_vx_key,
    (0xF, 0x15): load.decode_ld_dt_vx,
    (0xF, 0x18): load.decode_ld_st_vx,
    (0xF, 0x1E): load.decode_add_i,
    (0xF, 0x29): load.decode_ld_glyph,
    (0xF, 0x33): load.decode_ld_bcd,
    (0xF, 0x55): load.decode_store_block,
    (0xF, 0x65): load.decode_load_block,
}

# @intent:map 命令パターンから実行関数へのマッピングテーブル。
EXECUTE_MAP = {
    # Display
    "00E0": display.execute_cls,
    "DXYN": display.execute_drw,

    # Control
    "00EE": control.execute_ret,
    "1NNN": control.execute_jp,
    "2NNN": control.execute_call,
    "3XKK": control.execute_se_byte,
    "4XKK": control.execute_sne_byte,
    "5XY0": control.execute_se_reg,
    "9XY0": control.execute_sne_reg,
    "BNNN": control.execute_jp_v0,
    "EX9E": control.execute_skp,
    "EXA1": control.execute_sknp,

    # ALU
    "6XKK": alu.execute_ld_byte,
    "7XKK": alu.execute_add_byte,
    "8XY0": alu.execute_ld_reg,
    "8XY1": alu.execute_or,
    "8XY2": alu.execute_and,
    "8XY3": alu.execute_xor,
    "8XY4": alu.execute_add_reg,
    "8XY5": alu.execute_sub,
    "8XY6": alu.execute_shr,
    "8XY7": alu.execute_subn,
    "8XYE": alu.execute_shl,
    "CXKK": alu.execute_rnd,

    # Load
    "ANNN": load.execute_ld_i,
    "FX07": load.execute_ld_vx_dt,
    "FX0A": load.execute_ld_vx_key,
    "FX15": load.execute_ld_dt_vx,
    "FX18": load.execute_ld_st_vx,
    "FX1E": load.execute_add_i,
    "FX29": load.execute_ld_glyph,
    "FX33": load.execute_ld_bcd,
    "FX55": load.execute_store_block,
    "FX65": load.execute_load_block,
}
