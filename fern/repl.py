"""Interactive mode for the Fern interpreter. Uses cmd as backend."""

import cmd

from .diagnostics import render_exception
from .errors import FernError, ParseError
from .interpreter import Interpreter
from .parser import parse_source
from .types import to_string


class Shell(cmd.Cmd):
    """Fern interpreter shell."""
    intro = "Fern interpreter\nType 'help' for more information, 'exit' to leave."
    prompt = "> "
    secondary_prompt = ". "  # used while a construct is still open
    _tmp_prompt = "> "

    def __init__(self, interpreter=None, name="<repl>", *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.interpreter = interpreter if interpreter is not None else Interpreter()
        self.name = name
        self._tmp_source = ""

    def default(self, line):
        """Evaluates a line of Fern, continuing an unfinished one if needed."""
        source = self._tmp_source + line
        try:
            program = parse_source(source)
        except ParseError as e:
            if e.message.startswith("Ran out of tokens"):
                self._tmp_source = source + "\n"
                self.prompt = self.secondary_prompt
                return
            self._reset()
            self.stdout.write(render_exception(e, source, self.name) + "\n")
            return
        except FernError as e:
            self._reset()
            self.stdout.write(render_exception(e, source, self.name) + "\n")
            return

        self._reset()
        try:
            values = self.interpreter.run(program)
        except FernError as e:
            self.stdout.write(render_exception(e, source, self.name) + "\n")
            return
        for value in values:
            self.stdout.write(to_string(value) + "\n")

    def _reset(self):
        self._tmp_source = ""
        self.prompt = self._tmp_prompt

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        self.stdout.write(
            "Fern is a small functional language.\n\n"
            "Try 'let double = lambda(x): x * 2 end' and then 'double(21)'.\n"
            "Functions are defined with 'function name(args): body end', data types\n"
            "with 'data Shape = Circle(r) | Square(side)' and taken apart with\n"
            "'match value case Circle(r): r case Square(s): s end'.\n"
        )

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return False

    def do_EOF(self, arg):
        """Exits interpreter."""
        self.stdout.write("\n")
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
