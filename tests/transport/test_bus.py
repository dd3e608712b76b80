# tests/transport/test_bus.py
"""
chip8_core_tracer.transport.busモジュールの単体テスト。
"""
import pytest
from chip8_core_tracer.transport.bus import Bus, Device, RAM, BusAccessType

# @intent:test_suite 共通バスとデバイスの基本的な機能とアクセス記録を検証します。

class TestRAM:
    """
    RAMデバイスの単体テスト。
    """
    def test_ram_init_valid_size(self):
        ram = RAM(16)
        assert ram.get_size() == 16
        assert all(ram.read(i) == 0 for i in range(16))

    def test_ram_init_invalid_size(self):
        with pytest.raises(ValueError, match="RAM size must be a positive integer."):
            RAM(0)
        with pytest.raises(ValueError, match="RAM size must be a positive integer."):
            RAM(1.5)

    def test_ram_read_write_out_of_bounds(self):
        ram = RAM(4)
        with pytest.raises(IndexError, match="Address 4 out of bounds for RAM of size 4."):
            ram.read(4)
        with pytest.raises(IndexError, match="Address -1 out of bounds for RAM of size 4."):
            ram.write(-1, 0x00)

    def test_ram_write_invalid_data(self):
        ram = RAM(1)
        with pytest.raises(ValueError, match="Data 256 is not an 8-bit value."):
            ram.write(0, 0x100)

class TestBus:
    """
    Busの単体テスト。
    """
    @pytest.fixture
    def bus(self):
        bus = Bus()
        bus.register_device(0x000, 0xFFF, RAM(0x1000))
        return bus

    def test_bus_register_and_access_device(self):
        bus = Bus()
        ram1 = RAM(16)
        ram2 = RAM(16)
        bus.register_device(0x0000, 0x000F, ram1)
        bus.register_device(0x0010, 0x001F, ram2)

        bus.write(0x001A, 0xBB)
        assert bus.read(0x001A) == 0xBB
        assert ram2.read(0x0A) == 0xBB
        assert bus.get_devices() == [ram1, ram2]

    # @intent:test_case_log read/writeが順番通りに記録され、取得時にクリアされることを検証します。
    def test_activity_log_records_reads_and_writes(self, bus):
        bus.write(0x300, 0x12)
        bus.read(0x300)

        log = bus.get_and_clear_activity_log()
        assert [(a.address, a.data, a.access_type) for a in log] == [
            (0x300, 0x12, BusAccessType.WRITE),
            (0x300, 0x12, BusAccessType.READ),
        ]
        assert bus.get_and_clear_activity_log() == []

    # @intent:test_case_previous_data 書き込みログが書き込み前の値を保持することを検証します。
    def test_write_records_previous_data(self, bus):
        bus.write(0x400, 0x11)
        bus.write(0x400, 0x22)
        log = bus.get_and_clear_activity_log()
        assert log[0].previous_data == 0x00
        assert log[1].previous_data == 0x11
        assert log[1].data == 0x22

    # @intent:test_case_peek_load peekとloadはログを残さないことを検証します。
    def test_peek_and_load_are_not_logged(self, bus):
        bus.load(0x200, 0xA2)
        assert bus.peek(0x200) == 0xA2
        assert bus.get_and_clear_activity_log() == []

    def test_register_non_device(self):
        bus = Bus()
        with pytest.raises(TypeError):
            bus.register_device(0x0000, 0x000F, object())

    def test_custom_device(self):
        class ConstantDevice(Device):
            def read(self, address):
                return 0x5A

            def write(self, address, data):
                pass

        bus = Bus()
        bus.register_device(0x0000, 0x0003, ConstantDevice())
        assert bus.read(0x0002) == 0x5A
