# chip8_core_tracer/core/snapshot.py
"""
実行状態の不変スナップショット

このモジュールは、1命令実行後のCPUとバスの状態を記録した不変のデータ構造を定義します。
デバッガへの情報提供と、実行履歴の記録に用いる責務を負います。
"""
from dataclasses import dataclass, field
from typing import List, Optional

from chip8_core_tracer.core.state import CpuState
from chip8_core_tracer.transport.bus import BusAccessType, BusAccess


# @intent:responsibility デコードされた命令の詳細を記録します。
# @intent:rationale patternはデコード結果のタグであり、実行テーブルのキーとして使用されます（例: "8XY4"）。
#                  オペランドのフィールドはopcodeから都度切り出すため、デコードは純粋関数のまま保てます。
@dataclass(frozen=True)
class Operation:
    """
    デコードされた命令（2バイトのオペコードとその解釈）を記録するデータクラス。
    """
    opcode_hex: str # 例: "8124"
    mnemonic: str # 例: "ADD"
    operands: List[str] = field(default_factory=list) # 例: ["V1", "V2"]
    pattern: str = "" # 例: "8XY4"
    opcode: int = 0
    cycle_count: int = 1
    length: int = 2

    @property
    def nnn(self) -> int:
        return self.opcode & 0x0FFF

    @property
    def x(self) -> int:
        return (self.opcode >> 8) & 0x0F

    @property
    def y(self) -> int:
        return (self.opcode >> 4) & 0x0F

    @property
    def kk(self) -> int:
        return self.opcode & 0x00FF

    @property
    def n(self) -> int:
        return self.opcode & 0x000F

# @intent:responsibility 実行に関するメタデータを記録します。
@dataclass(frozen=True)
class Metadata:
    """
    実行に関するメタデータ（累計命令数、命令の表示文字列など）を記録するデータクラス。
    """
    cycle_count: int
    symbol_info: Optional[str] = None # 例: "DRW V0, V1, 5"

# @intent:responsibility ある一時点におけるCPUとバスの状態を不変に記録します。
@dataclass(frozen=True)
class Snapshot:
    """
    命令実行直後の、CPUとバスの状態を記録した不変のデータ構造。
    stateはスナップショット生成時点のコピーであり、以降のCPU実行の影響を受けません。
    """
    state: CpuState
    operation: Operation
    metadata: Metadata
    bus_activity: List[BusAccess] = field(default_factory=list)
