# src/chip8_core_tracer/arch/chip8/cpu.py
"""
CHIP-8 VMエミュレーションの中心モジュール。

ホスト（フロントエンド）は以下の順序でVMを駆動します。
1フレームごとに step() を任意回数呼び出し、tick_timers() を1回呼び出し、
framebuffer() を読み出して描画し、キーイベントを set_input() で通知します。
"""
import logging
import random
from typing import Dict, List, Optional, Tuple

from chip8_core_tracer.core.cpu import AbstractCpu
from chip8_core_tracer.transport.bus import Bus
from chip8_core_tracer.arch.chip8.state import (
    Chip8CpuState, GLYPH_SET, MEMORY_SIZE, PROGRAM_START, MAX_PROGRAM_SIZE, ADDRESS_MASK, FLAG
)
from chip8_core_tracer.arch.chip8.errors import ProgramTooLargeError
from chip8_core_tracer.arch.chip8.instructions import (
    decode_opcode, execute_instruction, ExecutionContext, QuirkFlags
)
from chip8_core_tracer.arch.chip8 import disassembler
from chip8_core_tracer.core.snapshot import Operation

logger = logging.getLogger(__name__)

# @intent:responsibility CHIP-8 VMの具体的なエミュレーションロジック（フェッチ、デコード、実行）とホスト向けAPIを提供します。
class Chip8Cpu(AbstractCpu):
    """
    CHIP-8 VMをエミュレートするクラス。
    メモリは `bus` の 0x000-0xFFF にマップされたデバイスとして扱います。
    """
    # @intent:pre-condition `bus`の 0x000-0xFFF にデバイスが登録されている必要があります。
    # @intent:rationale 乱数源は外部から注入でき、シード固定により実行を再現可能にします。
    def __init__(self, bus: Bus, rng: Optional[random.Random] = None, quirks: Optional[QuirkFlags] = None):
        self._context = ExecutionContext(
            quirks=quirks if quirks is not None else QuirkFlags(),
            rng=rng if rng is not None else random.Random(),
        )
        super().__init__(bus)
        self._reset_memory()

    def _create_initial_state(self) -> Chip8CpuState:
        return Chip8CpuState()

    # @intent:responsibility メモリ全体をゼロクリアし、0x000からグリフセットを配置します。
    def _reset_memory(self) -> None:
        for address in range(MEMORY_SIZE):
            self._bus.load(address, 0)
        for offset, value in enumerate(GLYPH_SET):
            self._bus.load(offset, value)

    # --- Quirk flags ---
    @property
    def shift_uses_vy(self) -> bool:
        return self._context.quirks.shift_uses_vy

    @shift_uses_vy.setter
    def shift_uses_vy(self, value: bool) -> None:
        self._context.quirks.shift_uses_vy = bool(value)

    @property
    def increment_index_on_block_transfer(self) -> bool:
        return self._context.quirks.increment_index_on_block_transfer

    @increment_index_on_block_transfer.setter
    def increment_index_on_block_transfer(self, value: bool) -> None:
        self._context.quirks.increment_index_on_block_transfer = bool(value)

    # @intent:responsibility 乱数源を差し替えます。テストやリプレイでシードを固定するために使用します。
    def set_rng(self, rng: random.Random) -> None:
        self._context.rng = rng

    # @intent:responsibility プログラムを0x200からロードし、VMを初期状態に戻します。
    # @intent:pre-condition プログラムはbytes-likeオブジェクト（bytes、bytearray、memoryview）で、3584バイト以下である必要があります。
    # @intent:post-condition 失敗した場合、ロード前の状態（メモリ、レジスタ、画面）は一切変更されません。
    def load(self, program: bytes) -> None:
        data = memoryview(program).tobytes()
        if len(data) > MAX_PROGRAM_SIZE:
            logger.error("Rejected program of %d bytes (limit %d)", len(data), MAX_PROGRAM_SIZE)
            raise ProgramTooLargeError(len(data), MAX_PROGRAM_SIZE)

        self._reset_memory()
        for offset, value in enumerate(data):
            self._bus.load(PROGRAM_START + offset, value)

        self.reset()
        self._bus.get_and_clear_activity_log()
        logger.info("Loaded CHIP-8 program (%d bytes)", len(data))

    # @intent:responsibility PCの位置から2バイトのビッグエンディアン命令をフェッチします。
    def _fetch(self) -> int:
        pc = self._state.pc
        high = self._bus.read(pc & ADDRESS_MASK)
        low = self._bus.read((pc + 1) & ADDRESS_MASK)
        return (high << 8) | low

    def _decode(self, opcode: int) -> Operation:
        return decode_opcode(opcode)

    def _execute(self, operation: Operation) -> None:
        execute_instruction(operation, self._state, self._bus, self._context)

    def _copy_state(self, state: Chip8CpuState) -> Chip8CpuState:
        return state.copy()

    # @intent:responsibility 60Hzの外部クロックごとに呼ばれ、遅延タイマーとサウンドタイマーを1ずつ減らします（0で止まる）。
    def tick_timers(self) -> None:
        state = self._state
        if state.dt > 0:
            state.dt -= 1
        if state.st > 0:
            state.st -= 1

    # @intent:responsibility サウンドタイマーが非ゼロ（音を鳴らすべき状態）かどうかを返します。
    @property
    def sound_active(self) -> bool:
        return self._state.st > 0

    # @intent:responsibility 現在押されているキー（0..15、または押されていない場合None）を設定します。
    def set_input(self, key: Optional[int]) -> None:
        if key is not None and (isinstance(key, bool) or not isinstance(key, int) or not 0 <= key <= 0xF):
            raise ValueError(f"Key must be in range 0..15 or None, got {key!r}.")
        self._state.key = key

    # @intent:responsibility 64x32の画素（1画素1バイト、行優先）を読み取り専用ビューとして返します。
    # @intent:rationale ビューはロード時に差し替わるバッファを参照するため、ホストはフレームごとに取得し直します。
    def framebuffer(self) -> memoryview:
        return memoryview(self._state.display).toreadonly()

    # @intent:responsibility デバッガやインスペクタ向けに、現在のレジスタ値を辞書形式で提供します。
    def get_register_map(self) -> Dict[str, int]:
        s = self._state
        registers = {f"V{index:X}": value for index, value in enumerate(s.v)}
        registers.update({"I": s.i, "PC": s.pc, "SP": s.sp, "DT": s.dt, "ST": s.st})
        return registers

    def get_flag_state(self) -> Dict[str, bool]:
        return {"VF": self._state.v[FLAG] != 0}

    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        return disassembler.disassemble(self._bus, start_addr, length)
