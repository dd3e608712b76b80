# chip8_core_tracer/debugger/debugger.py
"""
デバッガモジュール。

VMの実行を制御し、ユーザーが指定した条件（ブレークポイント）で
実行を中断させる責務を負います。実行履歴を保持し、step_backによる巻き戻しも提供します。
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from chip8_core_tracer.arch.chip8.cpu import Chip8Cpu
from chip8_core_tracer.arch.chip8.state import Chip8CpuState
from chip8_core_tracer.core.snapshot import Snapshot, BusAccessType

logger = logging.getLogger(__name__)

# @intent:responsibility ブレークポイントの条件タイプを定義します。
class BreakpointConditionType(Enum):
    PC_MATCH = "PC_MATCH"               # プログラムカウンタが特定のアドレスに一致
    MEMORY_READ = "MEMORY_READ"         # 特定のアドレスが読み込まれた
    MEMORY_WRITE = "MEMORY_WRITE"       # 特定のアドレスに書き込まれた
    REGISTER_VALUE = "REGISTER_VALUE"   # 特定のレジスタが特定の値になった
    REGISTER_CHANGE = "REGISTER_CHANGE" # 特定のレジスタの値が変化した

# @intent:responsibility ブレークポイントをトリガーする条件を定義します。
@dataclass(frozen=True)
class BreakpointCondition:
    """
    ブレークポイントがヒットするための条件を定義するデータクラス。
    register_nameは "V0".."VF", "I", "PC", "SP", "DT", "ST" のいずれかです。
    """
    condition_type: BreakpointConditionType
    value: Optional[int] = None           # PC_MATCH, REGISTER_VALUEで使用
    address: Optional[int] = None         # MEMORY_READ, MEMORY_WRITEで使用
    register_name: Optional[str] = None   # REGISTER_VALUE, REGISTER_CHANGEで使用
    enabled: bool = True

# @intent:responsibility VMの実行制御とブレークポイント管理を行います。
class Debugger:
    """
    VMの実行を制御し、ブレークポイントの管理を行うクラス。
    """
    def __init__(self, cpu: Chip8Cpu, history_limit: int = 10000, instructions_per_frame: int = 10):
        if instructions_per_frame <= 0:
            raise ValueError(f"instructions_per_frame must be positive: {instructions_per_frame}")
        self._cpu = cpu
        self._instructions_per_frame = instructions_per_frame
        self._breakpoints: List[BreakpointCondition] = []
        self._running: bool = False
        self._breakpoint_hit: bool = False
        self._history_limit = history_limit
        self.reset_history()

    # @intent:responsibility 実行履歴を破棄し、現在の状態を巻き戻しの起点とします。プログラムの再ロード後に呼び出します。
    def reset_history(self) -> None:
        self._history: List[Snapshot] = []
        self._initial_state: Chip8CpuState = self._cpu.get_state().copy()
        self._previous_state: Chip8CpuState = self._initial_state
        self._last_snapshot: Optional[Snapshot] = None

    def add_breakpoint(self, condition: BreakpointCondition) -> None:
        if condition not in self._breakpoints:
            self._breakpoints.append(condition)

    def update_breakpoint(self, old_condition: BreakpointCondition, new_condition: BreakpointCondition) -> None:
        if old_condition in self._breakpoints:
            idx = self._breakpoints.index(old_condition)
            self._breakpoints[idx] = new_condition

    def remove_breakpoint(self, condition: BreakpointCondition) -> None:
        if condition in self._breakpoints:
            self._breakpoints.remove(condition)

    def get_breakpoints(self) -> List[BreakpointCondition]:
        return list(self._breakpoints)

    def get_history(self) -> List[Snapshot]:
        return list(self._history)

    def get_last_snapshot(self) -> Optional[Snapshot]:
        return self._last_snapshot

    def is_running(self) -> bool:
        return self._running

    @property
    def instructions_per_frame(self) -> int:
        return self._instructions_per_frame

    def _pc_breakpoint_hit(self, pc: int) -> bool:
        return any(
            bp.enabled and bp.condition_type == BreakpointConditionType.PC_MATCH and bp.value == pc
            for bp in self._breakpoints
        )

    # @intent:responsibility SnapshotをもとにPC_MATCH以外のブレークポイントをチェックします。
    def _check_other_breakpoints(self, snapshot: Snapshot) -> bool:
        current_state = snapshot.state

        for bp in self._breakpoints:
            if not bp.enabled:
                continue

            if bp.condition_type == BreakpointConditionType.MEMORY_READ:
                for access in snapshot.bus_activity:
                    if access.access_type == BusAccessType.READ and access.address == bp.address:
                        return True
            elif bp.condition_type == BreakpointConditionType.MEMORY_WRITE:
                for access in snapshot.bus_activity:
                    if access.access_type == BusAccessType.WRITE and access.address == bp.address:
                        return True
            elif bp.condition_type == BreakpointConditionType.REGISTER_VALUE:
                if bp.register_name and current_state.get_register(bp.register_name) == bp.value:
                    return True
            elif bp.condition_type == BreakpointConditionType.REGISTER_CHANGE:
                if bp.register_name:
                    current = current_state.get_register(bp.register_name)
                    previous = self._previous_state.get_register(bp.register_name)
                    if current is not None and current != previous:
                        return True
        return False

    # @intent:responsibility VMを1命令分実行し、Snapshotを履歴に追加して返します。
    def step_instruction(self) -> Snapshot:
        self._previous_state = self._cpu.get_state().copy()
        snapshot = self._cpu.step()
        self._last_snapshot = snapshot

        self._history.append(snapshot)
        if len(self._history) > self._history_limit:
            # 最古の履歴を捨て、その実行後の状態を新たな巻き戻しの起点とする
            dropped = self._history.pop(0)
            self._initial_state = dropped.state.copy()

        return snapshot

    # @intent:responsibility 実行履歴を1つ戻り、メモリとVMの状態を復元します。
    # @intent:return 復元後の直前のSnapshot。起点まで戻った場合はNone。
    def step_back(self) -> Optional[Snapshot]:
        if not self._history:
            return None

        snapshot_to_revert = self._history.pop()

        # バスアクティビティを逆順にスキャンし、書き込み操作を取り消す
        bus = self._cpu._bus
        for access in reversed(snapshot_to_revert.bus_activity):
            if access.access_type == BusAccessType.WRITE and access.previous_data is not None:
                bus.load(access.address, access.previous_data)

        if self._history:
            previous_snapshot = self._history[-1]
            self._cpu.restore_state(previous_snapshot.state)
            self._last_snapshot = previous_snapshot
            return previous_snapshot

        self._cpu.restore_state(self._initial_state)
        self._last_snapshot = None
        return None

    # @intent:responsibility ブレークポイントにヒットするか、stop()されるか、max_stepsに達するまで実行を継続します。
    # @intent:post-condition 命令の実行中に例外が発生した場合も、実行中フラグは解除された上で例外が伝播します。
    # @intent:return 実行した命令数。
    def run(self, max_steps: Optional[int] = None) -> int:
        self._running = True
        steps = 0
        self._breakpoint_hit = False

        try:
            # 現在のPCにブレークポイントがある場合は、まず1命令進めてから判定を始める
            if (max_steps is None or max_steps > 0) and self._pc_breakpoint_hit(self._cpu.get_state().pc):
                self.step_instruction()
                steps += 1

            while self._running and (max_steps is None or steps < max_steps):
                current_pc = self._cpu.get_state().pc
                if self._pc_breakpoint_hit(current_pc):
                    logger.info("Breakpoint hit at PC: %#05x", current_pc)
                    self._breakpoint_hit = True
                    break

                snapshot = self.step_instruction()
                steps += 1

                if self._check_other_breakpoints(snapshot):
                    logger.info("Breakpoint hit at PC: %#05x", snapshot.state.pc)
                    self._breakpoint_hit = True
                    break
        finally:
            self._running = False
        return steps

    # @intent:responsibility ホストの1フレーム分（instructions回のstepの後にタイマーを1回減算）を実行します。
    # @intent:pre-condition instructionsを省略した場合は、構築時に指定された1フレームあたりの命令数を使用します。
    # @intent:return ブレークポイントで中断した場合はFalse（タイマーは減算されません）。
    def run_frame(self, instructions: Optional[int] = None) -> bool:
        if instructions is None:
            instructions = self._instructions_per_frame
        steps = self.run(max_steps=instructions)
        if self._breakpoint_hit or steps < instructions:
            return False
        self._cpu.tick_timers()
        return True

    def stop(self) -> None:
        self._running = False
