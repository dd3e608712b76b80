# tests/config/test_config.py
"""
chip8_core_tracer.configパッケージ（ConfigLoader、SystemBuilder）の単体テスト。
"""
import pytest

from chip8_core_tracer.config.loader import ConfigLoader
from chip8_core_tracer.config.builder import SystemBuilder
from chip8_core_tracer.config.models import SystemConfig, QuirkConfig
from chip8_core_tracer.transport.bus import RAM

# @intent:test_suite YAML設定の読み込みとシステム構築を検証します。

SAMPLE_YAML = """
architecture: CHIP8
quirks:
  shift_uses_vy: true
  increment_index_on_block_transfer: false
seed: 0x2A
instructions_per_frame: 12
"""

class TestConfigLoader:
    # @intent:test_case_file ファイルからの読み込みで全項目が反映されることを検証します。
    def test_load_from_file(self, tmp_path):
        path = tmp_path / "chip8.yaml"
        path.write_text(SAMPLE_YAML)

        config = ConfigLoader().load_from_file(str(path))

        assert config.architecture == "CHIP8"
        assert config.quirks == QuirkConfig(shift_uses_vy=True, increment_index_on_block_transfer=False)
        assert config.seed == 42
        assert config.instructions_per_frame == 12

    def test_defaults_for_empty_document(self):
        assert ConfigLoader().load_from_string("") == SystemConfig()

    def test_hex_and_decimal_strings(self):
        config = ConfigLoader().load_from_string('seed: "0x10"\ninstructions_per_frame: "8"\n')
        assert config.seed == 16
        assert config.instructions_per_frame == 8

    @pytest.mark.parametrize("text", [
        "- just\n- a list\n",
        "instructions_per_frame: 0\n",
        "instructions_per_frame: true\n",
        "seed: 1.5\n",
        "seed: banana\n",
        "quirks:\n  shift_uses_vy: \"yes please\"\n",
    ])
    def test_invalid_documents(self, text):
        with pytest.raises(ValueError):
            ConfigLoader().load_from_string(text)

class TestSystemBuilder:
    def test_build_system_maps_4kb_ram(self):
        cpu, bus = SystemBuilder().build_system(SystemConfig())

        devices = bus.get_devices()
        assert len(devices) == 1
        assert isinstance(devices[0], RAM)
        assert devices[0].get_size() == 0x1000
        assert cpu.get_state().pc == 0x200

    def test_build_system_applies_quirks(self):
        config = SystemConfig(quirks=QuirkConfig(shift_uses_vy=True, increment_index_on_block_transfer=True))
        cpu, _ = SystemBuilder().build_system(config)
        assert cpu.shift_uses_vy is True
        assert cpu.increment_index_on_block_transfer is True

    # @intent:test_case_seed 同じシードで構築したVMは同じ乱数列を生成することを検証します。
    def test_build_system_seed_is_reproducible(self):
        program = bytes([0xC0, 0xFF, 0xC1, 0xFF, 0xC2, 0xFF, 0xC3, 0xFF])

        def run_once():
            cpu, _ = SystemBuilder().build_system(SystemConfig(seed=7))
            cpu.load(program)
            for _ in range(4):
                cpu.step()
            return list(cpu.get_state().v[:4])

        assert run_once() == run_once()

    def test_unsupported_architecture(self):
        with pytest.raises(ValueError, match="Unsupported architecture"):
            SystemBuilder().build_system(SystemConfig(architecture="Z80"))

    def test_architecture_is_case_insensitive(self):
        cpu, _ = SystemBuilder().build_system(SystemConfig(architecture="chip8"))
        assert cpu.get_state().pc == 0x200

    # @intent:test_case_frame 設定の instructions_per_frame が1フレームの命令数に反映されることを検証します。
    def test_build_debugger_applies_instructions_per_frame(self):
        config = ConfigLoader().load_from_string("instructions_per_frame: 3\n")
        builder = SystemBuilder()
        cpu, _ = builder.build_system(config)
        # 0x200: LD V0, #$01 / 0x202: ADD V0, #$01 / 0x204: JP $202
        cpu.load(bytes([0x60, 0x01, 0x70, 0x01, 0x12, 0x02]))
        debugger = builder.build_debugger(config, cpu)

        assert debugger.instructions_per_frame == 3
        assert debugger.run_frame() is True
        assert len(debugger.get_history()) == 3
        assert cpu.get_state().v[0] == 2

        default_debugger = builder.build_debugger(SystemConfig(), cpu)
        assert default_debugger.instructions_per_frame == 10
