# src/chip8_core_tracer/arch/chip8/__init__.py
"""
CHIP-8 Architecture Package
"""
from .cpu import Chip8Cpu
from .state import Chip8CpuState
