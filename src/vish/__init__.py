"""vish: interactive shell with a raw-mode line editor and quoting-aware tokenizer."""

# Line buffer
from vish.line_buffer import BufferDecodeError, LineBuffer

# Terminal interface and implementation
from vish.terminal import (
    ControlChars,
    ProcessTerminal,
    RawModeUnsupportedError,
    Terminal,
    TerminalIOError,
)

# Input decoding and line editing
from vish.input_decoder import Arrow, DecoderState, Grapheme, InputDecoder
from vish.reader import LineEditor, ReadResult, erase_word

# Expansion and tokenizing
from vish.expand import expand_parameter, expand_tilde
from vish.field import (
    Field,
    FieldEvaluator,
    FieldKind,
    PlaceholderEvaluator,
    classify,
    substitute,
)
from vish.tokenizer import parse_argv, split_argv

# Session
from vish.config import ShellConfig
from vish.environment import ShellEnvironment

__all__ = [
    # Line buffer
    "BufferDecodeError",
    "LineBuffer",
    # Terminal
    "ControlChars",
    "ProcessTerminal",
    "RawModeUnsupportedError",
    "Terminal",
    "TerminalIOError",
    # Input
    "Arrow",
    "DecoderState",
    "Grapheme",
    "InputDecoder",
    "LineEditor",
    "ReadResult",
    "erase_word",
    # Expansion
    "expand_parameter",
    "expand_tilde",
    "Field",
    "FieldEvaluator",
    "FieldKind",
    "PlaceholderEvaluator",
    "classify",
    "substitute",
    "parse_argv",
    "split_argv",
    # Session
    "ShellConfig",
    "ShellEnvironment",
]
