import random

import pytest

from chip8_core_tracer.transport.bus import Bus, RAM
from chip8_core_tracer.arch.chip8.cpu import Chip8Cpu


@pytest.fixture
def bus():
    bus = Bus()
    bus.register_device(0x000, 0xFFF, RAM(0x1000))
    return bus


@pytest.fixture
def cpu(bus):
    return Chip8Cpu(bus, rng=random.Random(1234))


@pytest.fixture
def load_words(cpu):
    """16ビット命令列をビッグエンディアンで0x200からロードする。"""
    def _load(*words):
        cpu.load(b"".join(word.to_bytes(2, "big") for word in words))
        return cpu.get_state()
    return _load
