## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# yafsh — A stack-based, Forth-derived command language that doubles as a shell.
#

import sys
import traceback

import click

from .types import Output, nil
from .errors import YafshError, YafshExecError, YafshSyntaxError
from .parser import is_incomplete
from .formatting import write_without_ansi, format_item, format_prompt
from .config import VERSION, RuntimeConfig, rc_path, history_path
from .runtime import iter_statements

from . import api


class ShellRunner:
    def __init__(self, config: RuntimeConfig):
        self.ignore = config.ignore
        self.norc = config.norc

        if config.plain:
            writer = write_without_ansi(sys.stdout.write)
            sys.stdout.write, sys.stderr.write = writer, writer

        self.runtime = api._RUNTIME
        self.runtime.state.verbosity = config.verbose
        self.runtime.state.max_depth = config.max_depth
        self.failure = False

    def _report_error(self, exc: Exception, filename: str, is_repl: bool) -> None:
        if isinstance(exc, YafshSyntaxError):
            banner = "SYNTAX ERROR."
        elif isinstance(exc, YafshExecError):
            banner = "EXEC ERROR."
        elif isinstance(exc, YafshError):
            banner = "ERROR."
        else:
            banner = "INTERNAL ERROR."

        where = '' if is_repl else f" in `\033[97m{filename}\033[0m`"
        print(f'\033[30;43m {banner} \033[0m {exc}{where} (Exception: \033[33m{type(exc).__name__}\033[0m)', file=sys.stderr)
        if not isinstance(exc, YafshError):
            traceback.print_exc()

        if not is_repl:
            self.failure = True
            if not self.ignore: sys.exit(1)

    def _execute(self, source: str, filename: str, is_repl: bool = False) -> bool:
        try:
            self.runtime.run_line(source)
            return True
        except KeyboardInterrupt:
            print('\n\033[33mInterrupted.\033[0m', file=sys.stderr)
            self.runtime.state.pending = None
            if not is_repl: sys.exit(130)
        except Exception as exc:
            self._report_error(exc, filename, is_repl)
        return False

    def run_script(self, source: str, filename: str) -> None:
        for chunk in iter_statements(source):
            self._execute(chunk, filename)

    def run_command(self, code: str, index: int) -> None:
        self.run_script(code, f'<INPUT_{index}>')
        stack = self.runtime.stack
        if stack is nil: return
        if isinstance(stack.head, Output):
            print(stack.head.text, end='' if stack.head.text.endswith('\n') else '\n')
        else:
            print(format_item(stack.head))

    def load_rc(self) -> None:
        if self.norc or (path := rc_path()) is None or not path.is_file():
            return
        self.run_script(path.read_text(encoding='utf-8'), str(path))

    def _auto_type(self) -> None:
        """Show a captured output left on top of the stack, without consuming it."""
        stack = self.runtime.stack
        if stack is not nil and isinstance(stack.head, Output):
            print(stack.head.text, end='', flush=True)

    def repl(self) -> None:
        readline = None
        if sys.platform != "win32": import readline

        history = history_path()
        if readline is not None and history is not None and history.is_file():
            readline.read_history_file(history)

        print(f'yafsh {VERSION}')
        print("Type 'exit' to quit, Ctrl-D for EOF")
        print()

        source = ""
        while True:
            try:
                line = input(format_prompt(self.runtime.stack) if not source else "... ")
            except EOFError:
                print("\nGoodbye!"); break
            except KeyboardInterrupt:
                print(""); source = ""; continue

            if not source:
                if not line.strip(): continue
                if line.strip() in ('exit', 'quit'):
                    print("Goodbye!"); break
            source = f"{source}\n{line}" if source else line
            if is_incomplete(source): continue

            text, source = source, ""
            if self._execute(text, '<REPL>', is_repl=True):
                self._auto_type()

        if readline is not None and history is not None:
            try:
                readline.write_history_file(history)
            except OSError as exc:
                print(f'\033[33mCould not save history to {history}: {exc.strerror}\033[0m', file=sys.stderr)

    def finalize(self) -> int:
        return 1 if self.failure else 0


@click.command(context_settings={'help_option_names': ['-h', '--help']})
@click.argument('script', required=False, type=click.File('r', encoding='utf-8'))
@click.option('--command', '-c', 'commands', multiple=True, help='Run inline code and print the top of the stack.')
@click.option('--verbose', '-v', default=0, count=True, help='Trace each executed token (repeat for more detail).')
@click.option('--ignore', '-i', is_flag=True, help='Ignore errors and continue executing.')
@click.option('--plain', '-p', is_flag=True, help='Strip ANSI color codes and redirect stderr to stdout.')
@click.option('--norc', is_flag=True, help='Do not evaluate ~/.yafshrc before the REPL starts.')
@click.option('--max-depth', default=100, show_default=True, type=click.IntRange(min=1), help='Nesting limit for words, loops and each.')
@click.version_option(VERSION, prog_name='yafsh')
@click.pass_context
def cli(ctx: click.Context, script, commands: tuple[str, ...], verbose: int, ignore: bool,
        plain: bool, norc: bool, max_depth: int) -> None:
    config = RuntimeConfig(verbose=verbose, ignore=ignore, plain=plain, norc=norc, max_depth=max_depth)
    runner = ShellRunner(config)

    if commands:
        for index, code in enumerate(commands, start=1):
            runner.run_command(code, index)
    elif script is not None:
        runner.run_script(script.read(), script.name or '<STDIN>')
    elif not sys.stdin.isatty():
        runner.run_script(sys.stdin.read(), '<STDIN>')
    else:
        runner.load_rc()
        runner.repl()
    ctx.exit(runner.finalize())


def main(argv: list[str] | None = None) -> None:
    cli.main(args=argv, prog_name='yafsh')


if __name__ == "__main__":
    main()
