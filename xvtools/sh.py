"""Parser for the shell's command language: words, < > >>, |, ;, & and ( )."""

from dataclasses import dataclass, field
from enum import Enum

MAXARGS = 10

_WHITESPACE = " \t\r\n\v"
_SYMBOLS = "<|>&;()"
_WORD = "a"
_END = ""


class ShellSyntaxError(ValueError):
    """Raised when a command line cannot be parsed."""

    def __init__(self, message, leftover=None):
        super().__init__(message)
        self.leftover = leftover


class RedirMode(Enum):
    """How a redirection opens its file."""

    READ = "<"
    WRITE = ">"
    APPEND = ">>"

    @property
    def fd(self):
        """The descriptor the redirection replaces."""
        return 0 if self is RedirMode.READ else 1


@dataclass
class ExecCmd:
    argv: list = field(default_factory=list)


@dataclass
class RedirCmd:
    cmd: object
    file: str
    mode: RedirMode
    fd: int


@dataclass
class PipeCmd:
    left: object
    right: object


@dataclass
class ListCmd:
    left: object
    right: object


@dataclass
class BackCmd:
    cmd: object


class _Parser:
    def __init__(self, text):
        self.text = text
        self.pos = 0

    def _skip_space(self):
        while self.pos < len(self.text) and self.text[self.pos] in _WHITESPACE:
            self.pos += 1

    def at_end(self):
        self._skip_space()
        return self.pos >= len(self.text)

    def rest(self):
        return self.text[self.pos:]

    def peek(self, toks):
        self._skip_space()
        return self.pos < len(self.text) and self.text[self.pos] in toks

    def token(self):
        """Consume one token; return its kind and, for words, its text."""
        self._skip_space()
        word = None
        if self.pos >= len(self.text):
            kind = _END
        else:
            c = self.text[self.pos]
            if c in "|();&<":
                self.pos += 1
                kind = c
            elif c == ">":
                self.pos += 1
                if self.text.startswith(">", self.pos):
                    self.pos += 1
                    kind = ">>"
                else:
                    kind = ">"
            else:
                start = self.pos
                while (
                    self.pos < len(self.text)
                    and self.text[self.pos] not in _WHITESPACE
                    and self.text[self.pos] not in _SYMBOLS
                ):
                    self.pos += 1
                kind = _WORD
                word = self.text[start:self.pos]
        self._skip_space()
        return kind, word

    def parse_line(self):
        cmd = self.parse_pipe()
        while self.peek("&"):
            self.token()
            cmd = BackCmd(cmd)
        if self.peek(";"):
            self.token()
            cmd = ListCmd(cmd, self.parse_line())
        return cmd

    def parse_pipe(self):
        cmd = self.parse_exec()
        if self.peek("|"):
            self.token()
            cmd = PipeCmd(cmd, self.parse_pipe())
        return cmd

    def parse_redirs(self, cmd):
        while self.peek("<>"):
            kind, _ = self.token()
            file_kind, file = self.token()
            if file_kind != _WORD:
                raise ShellSyntaxError("missing file for redirection")
            mode = RedirMode(kind)
            cmd = RedirCmd(cmd, file, mode, mode.fd)
        return cmd

    def parse_block(self):
        if not self.peek("("):
            raise ShellSyntaxError("parseblock")
        self.token()
        cmd = self.parse_line()
        if not self.peek(")"):
            raise ShellSyntaxError("syntax - missing )")
        self.token()
        return self.parse_redirs(cmd)

    def parse_exec(self):
        if self.peek("("):
            return self.parse_block()
        command = ExecCmd()
        ret = self.parse_redirs(command)
        while not self.peek("|)&;"):
            kind, word = self.token()
            if kind == _END:
                break
            if kind != _WORD:
                raise ShellSyntaxError("syntax")
            command.argv.append(word)
            if len(command.argv) >= MAXARGS:
                raise ShellSyntaxError("too many args")
            ret = self.parse_redirs(ret)
        return ret


def parse_command(line):
    """Parse one command line into a tree of command objects."""
    parser = _Parser(line.split("\0", 1)[0])
    cmd = parser.parse_line()
    if not parser.at_end():
        raise ShellSyntaxError("syntax", leftover=parser.rest())
    return cmd