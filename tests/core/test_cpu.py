# tests/core/test_cpu.py
"""
chip8_core_tracer.core.cpuモジュールの単体テスト。
"""
import pytest
from typing import Dict, List, Tuple

from chip8_core_tracer.core.state import CpuState
from chip8_core_tracer.core.cpu import AbstractCpu
from chip8_core_tracer.core.snapshot import Snapshot, Operation
from chip8_core_tracer.transport.bus import Bus, RAM, BusAccessType

# @intent:test_suite 抽象CPUの命令サイクル（テンプレートメソッド）とスナップショット生成を検証します。

class StubCpu(AbstractCpu):
    """1バイト命令のテスト用CPU。0xEEは実行時に例外を送出します。"""
    def __init__(self, bus: Bus, initial_pc: int = 0x0000):
        self._initial_pc = initial_pc
        super().__init__(bus)

    def _create_initial_state(self) -> CpuState:
        return CpuState(pc=self._initial_pc, sp=0)

    def _fetch(self) -> int:
        return self._bus.read(self._state.pc)

    def _decode(self, opcode: int) -> Operation:
        mnemonic = "NOP" if opcode == 0x00 else "UNKNOWN"
        return Operation(opcode_hex=f"{opcode:02X}", mnemonic=mnemonic, opcode=opcode, length=1)

    def _execute(self, operation: Operation) -> None:
        if operation.opcode == 0xEE:
            self._bus.write(0x0021, 0x01)
            raise RuntimeError("fault")
        self._bus.write(0x0020, 0xFF)

    def get_register_map(self) -> Dict[str, int]:
        return {"PC": self._state.pc, "SP": self._state.sp}

    def get_flag_state(self) -> Dict[str, bool]:
        return {}

    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        return [(start_addr + i, "00", "NOP") for i in range(length)]

class TestCpuState:
    def test_cpu_state_init_default(self):
        state = CpuState()
        assert state.pc == 0x0000
        assert state.sp == 0x0000

    def test_cpu_state_mutability(self):
        state = CpuState()
        state.pc = 0x1000
        assert state.pc == 0x1000

class TestAbstractCpu:
    @pytest.fixture
    def setup_cpu(self):
        bus = Bus()
        ram = RAM(256)
        bus.register_device(0x0000, 0x00FF, ram)
        cpu = StubCpu(bus, initial_pc=0x0010)
        return cpu, bus, ram

    def test_abstract_cpu_reset(self, setup_cpu):
        cpu, _, _ = setup_cpu
        cpu.get_state().pc = 0xAAAA
        cpu.reset()
        assert cpu.get_state().pc == 0x0010

    # @intent:test_case_step フェッチ→PC更新→実行→スナップショットの流れを検証します。
    def test_abstract_cpu_step(self, setup_cpu):
        cpu, bus, _ = setup_cpu
        bus.write(0x0010, 0x12)
        bus.get_and_clear_activity_log()

        snapshot = cpu.step()

        assert cpu.get_state().pc == 0x0011
        assert isinstance(snapshot, Snapshot)
        assert snapshot.state == cpu.get_state()
        assert snapshot.operation.mnemonic == "UNKNOWN"
        assert snapshot.metadata.cycle_count == 1
        assert snapshot.metadata.symbol_info == "UNKNOWN"
        assert [(a.address, a.access_type) for a in snapshot.bus_activity] == [
            (0x0010, BusAccessType.READ),
            (0x0020, BusAccessType.WRITE),
        ]

    # @intent:test_case_snapshot_isolated スナップショットの状態がその後の実行の影響を受けないことを検証します。
    def test_snapshot_state_is_a_copy(self, setup_cpu):
        cpu, _, _ = setup_cpu
        snapshot = cpu.step()
        cpu.step()
        assert snapshot.state.pc == 0x0011
        assert cpu.get_state().pc == 0x0012

    # @intent:test_case_fault 実行中の例外でPCが命令の先頭に戻り、例外が伝播することを検証します。
    def test_step_restores_pc_on_error(self, setup_cpu):
        cpu, bus, _ = setup_cpu
        bus.write(0x0010, 0xEE)
        with pytest.raises(RuntimeError):
            cpu.step()
        assert cpu.get_state().pc == 0x0010
        assert bus.get_and_clear_activity_log() == []

    def test_restore_state_copies(self, setup_cpu):
        cpu, _, _ = setup_cpu
        saved = CpuState(pc=0x0042, sp=3)
        cpu.restore_state(saved)
        cpu.get_state().pc = 0x0050
        assert saved.pc == 0x0042
