import logging
from pathlib import Path
from typing import List, Tuple

from memhier.entity.model import Instruction, InstructionKind
from memhier.entity.report import Diagnostic

logger = logging.getLogger(__name__)

_PREFIX_BASES = {"0x": 16, "0o": 8, "0b": 2}


def _parse_int(token: str) -> int:
    # leading zeros are plain decimal: "010" is 10
    base = _PREFIX_BASES.get(token.lstrip("+-")[:2].lower(), 10)
    return int(token, base)


def _warn(diagnostics: List[Diagnostic], lineno: int, message: str):
    logger.warning("line %d: %s", lineno, message)
    diagnostics.append(Diagnostic("warning", "parser", message, lineno))


def parse_kernel(kernel_code: str) -> Tuple[List[Instruction], List[Diagnostic]]:
    """Turn kernel text into instructions.

    Each line is ``KIND ADDRESS [SIZE]``. Lines with fewer than two tokens are
    ignored, ``#`` starts a comment line, and anything that does not make a
    valid instruction is skipped with a warning diagnostic.
    """
    instructions: List[Instruction] = []
    diagnostics: List[Diagnostic] = []

    for lineno, line in enumerate(kernel_code.splitlines(), start=1):
        parts = line.split()
        if len(parts) < 2 or parts[0].startswith("#"):
            continue

        kind_str = parts[0].upper()
        try:
            kind = InstructionKind(kind_str)
        except ValueError:
            _warn(diagnostics, lineno, f"Unknown instruction type: {kind_str}")
            continue

        try:
            address = _parse_int(parts[1])
            size = _parse_int(parts[2]) if len(parts) > 2 else None
        except ValueError:
            _warn(diagnostics, lineno, f"Malformed operand in: {line.strip()}")
            continue

        try:
            instructions.append(Instruction(kind, address, size))
        except ValueError as e:
            _warn(diagnostics, lineno, str(e))

    return instructions, diagnostics


def parse_kernel_file(path) -> Tuple[List[Instruction], List[Diagnostic]]:
    with open(Path(path), encoding="utf-8") as f:
        return parse_kernel(f.read())


__all__ = ["parse_kernel", "parse_kernel_file"]
