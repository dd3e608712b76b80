# tests/arch/chip8/test_chip8_display.py
"""
CHIP-8画面命令（CLS、DRW）の単体テスト。
"""
from chip8_core_tracer.arch.chip8.state import FLAG, DISPLAY_WIDTH, DISPLAY_HEIGHT

# @intent:test_suite XOR描画、衝突フラグ、画面端での折り返しを検証します。

def pixel(cpu, x, y):
    return cpu.framebuffer()[y * DISPLAY_WIDTH + x]

def lit_pixels(cpu):
    fb = cpu.framebuffer()
    return {(k % DISPLAY_WIDTH, k // DISPLAY_WIDTH) for k in range(len(fb)) if fb[k]}

class TestDraw:
    # @intent:test_case_collision 同じ1ビットのスプライトを2回描画すると、点灯(VF=0)→消灯(VF=1)となることを検証します。
    def test_draw_twice_toggles_and_sets_collision(self, cpu, load_words):
        # I=0x20A (0x80) / V0=3, V1=4 / DRW V0, V1, 1 を2回
        state = load_words(0xA20A, 0x6003, 0x6104, 0xD011, 0xD011, 0x8000)
        for _ in range(4):
            cpu.step()
        assert pixel(cpu, 3, 4) == 1
        assert state.v[FLAG] == 0

        cpu.step()
        assert pixel(cpu, 3, 4) == 0
        assert state.v[FLAG] == 1

    def test_draw_glyph(self, cpu, load_words):
        # "0"のグリフを (0, 0) に描画
        load_words(0x6000, 0xF029, 0xD005)
        for _ in range(3):
            cpu.step()
        expected = {(x, 0) for x in range(4)} | {(x, 4) for x in range(4)}
        expected |= {(0, y) for y in range(1, 4)} | {(3, y) for y in range(1, 4)}
        assert lit_pixels(cpu) == expected

    # @intent:test_case_wrap 右端・下端を超えた画素が反対側に折り返すことを検証します。
    def test_draw_wraps_around_edges(self, cpu, load_words):
        # I=0x20C (0xFF, 0xFF) / V0=60, V1=31 / DRW V0, V1, 2
        load_words(0xA20C, 0x603C, 0x611F, 0xD012, 0x0000, 0x0000, 0xFFFF)
        for _ in range(4):
            cpu.step()
        expected = {((60 + b) % 64, y) for b in range(8) for y in (31, 0)}
        assert lit_pixels(cpu) == expected

    def test_draw_coordinates_are_taken_modulo(self, cpu, load_words):
        load_words(0xA20A, 0x6041, 0x6122, 0xD011, 0x0000, 0x8000)
        for _ in range(4):
            cpu.step()
        assert lit_pixels(cpu) == {(1, 2)}

    # @intent:test_case_flag_reset 衝突が起きなかった描画ではVFが0にクリアされることを検証します。
    def test_draw_clears_flag_without_collision(self, cpu, load_words):
        state = load_words(0xA20A, 0x6F01, 0xD001, 0x0000, 0x0000, 0x8000)
        for _ in range(3):
            cpu.step()
        assert state.v[FLAG] == 0

    def test_draw_zero_rows(self, cpu, load_words):
        state = load_words(0xD000)
        state.v[FLAG] = 1
        cpu.step()
        assert lit_pixels(cpu) == set()
        assert state.v[FLAG] == 0

class TestClear:
    def test_cls(self, cpu, load_words):
        load_words(0xF029, 0xD005, 0x00E0)
        cpu.step()
        cpu.step()
        assert lit_pixels(cpu)
        cpu.step()
        assert lit_pixels(cpu) == set()
        assert len(cpu.framebuffer()) == DISPLAY_WIDTH * DISPLAY_HEIGHT
