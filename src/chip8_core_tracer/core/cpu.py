# chip8_core_tracer/core/cpu.py
"""
Core Layer (抽象CPU)

このモジュールは、CPUの基本的な状態管理と命令サイクルの駆動に関する抽象化を提供します。
具体的な命令の振る舞いはInstruction Layerに移譲されます。
"""
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Dict, List, Tuple

from chip8_core_tracer.transport.bus import Bus
from chip8_core_tracer.core.snapshot import Snapshot, Operation, Metadata
from chip8_core_tracer.core.state import CpuState

# @intent:responsibility 抽象CPUの基本機能とインターフェースを定義します。
class AbstractCpu(ABC):
    """
    全てのCPUエミュレーションの基底となる抽象クラス。
    Busとのインターフェース、基本的な状態管理、命令サイクルの抽象化を提供します。
    """
    # @intent:pre-condition `bus`は有効なBusオブジェクトである必要があります。
    def __init__(self, bus: Bus):
        self._bus = bus
        self._state: CpuState = self._create_initial_state()
        self._cycle_count: int = 0

    # @intent:responsibility 初期状態のCpuStateオブジェクトを生成します。
    @abstractmethod
    def _create_initial_state(self) -> CpuState:
        """
        CPUの初期状態を生成して返します。
        """
        pass

    # @intent:responsibility CPUをリセットし、初期状態に戻します。
    def reset(self) -> None:
        self._state = self._create_initial_state()
        self._cycle_count = 0

    def get_state(self) -> CpuState:
        """
        現在のCPUの状態（レジスタ値など）を返します。
        """
        return self._state

    # @intent:responsibility 外部から与えられた状態でCPUを上書きします。デバッガのstep_backで使用します。
    def restore_state(self, state: CpuState) -> None:
        self._state = self._copy_state(state)

    # @intent:responsibility スナップショット用に状態の独立したコピーを作成します。
    def _copy_state(self, state: CpuState) -> CpuState:
        return replace(state)

    @abstractmethod
    def _fetch(self) -> int:
        """
        現在のPCからメモリの次の命令（オペコード）をフェッチし、その値を返します。
        PCの更新は_update_pcで行います。
        """
        pass

    @abstractmethod
    def _decode(self, opcode: int) -> Operation:
        """
        与えられたオペコードを解析し、Operationオブジェクトとして返します。
        """
        pass

    @abstractmethod
    def _execute(self, operation: Operation) -> None:
        """
        デコードされた命令を実行し、CPUの状態を更新します。
        """
        pass

    # @intent:responsibility CPUを1命令サイクル進め、その結果のスナップショットを返します。
    # @intent:rationale Template Methodパターンで共通の実行フロー（ログクリア→フェッチ→デコード→PC更新→実行→Snapshot生成）を定義します。
    # @intent:post-condition 実行中に例外が発生した場合、PCはフェッチ前の値に戻された上で例外が伝播します。
    def step(self) -> Snapshot:
        self._bus.get_and_clear_activity_log()
        initial_pc = self._state.pc

        opcode = self._fetch()
        operation = self._decode(opcode)

        # 命令実行前にPCを命令長分進める（相対的な分岐は進めた後の値を基準とする）
        self._update_pc(operation)

        try:
            self._execute(operation)
        except Exception:
            self._state.pc = initial_pc
            self._bus.get_and_clear_activity_log()
            raise

        return self._create_snapshot(operation)

    def _update_pc(self, operation: Operation) -> None:
        self._state.pc = (self._state.pc + operation.length) & 0xFFFF

    def _create_snapshot(self, operation: Operation) -> Snapshot:
        bus_activity = self._bus.get_and_clear_activity_log()
        self._cycle_count += operation.cycle_count

        symbol_info = operation.mnemonic
        if operation.operands:
            symbol_info += " " + ", ".join(operation.operands)

        return Snapshot(
            state=self._copy_state(self._state),
            operation=operation,
            metadata=Metadata(cycle_count=self._cycle_count, symbol_info=symbol_info),
            bus_activity=bus_activity
        )

    @abstractmethod
    def get_register_map(self) -> Dict[str, int]:
        """
        現在のレジスタ値を辞書形式で返す。
        """
        pass

    @abstractmethod
    def get_flag_state(self) -> Dict[str, bool]:
        """
        現在のフラグの状態を辞書形式で返す。
        """
        pass

    @abstractmethod
    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        """
        指定されたメモリ範囲を逆アセンブルし、(address, hex_bytes, mnemonic) のタプルリストを返す。
        """
        pass
