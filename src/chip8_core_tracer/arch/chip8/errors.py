# src/chip8_core_tracer/arch/chip8/errors.py
"""
CHIP-8 VMが送出する例外の定義。
"""

class Chip8Error(Exception):
    """CHIP-8 VMが送出する例外の基底クラス。"""

# @intent:responsibility プログラムのロード失敗を表します。ロード前のVM状態は変更されません。
class LoadError(Chip8Error, ValueError):
    pass

class ProgramTooLargeError(LoadError):
    def __init__(self, size: int, limit: int):
        super().__init__(f"Program is {size} bytes; at most {limit} bytes fit above 0x200.")
        self.size = size
        self.limit = limit

# @intent:responsibility 16段のコールスタックの範囲外アクセスを表します。
# @intent:rationale 実機では未定義動作のため、命令を実行せずPCを命令の先頭に戻して送出します。
class StackFault(Chip8Error, IndexError):
    def __init__(self, message: str, pc: int):
        super().__init__(message)
        self.pc = pc

class StackOverflowError(StackFault):
    pass

class StackUnderflowError(StackFault):
    pass
