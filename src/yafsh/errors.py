## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘


class YafshError(Exception):
    def __init__(self, message: str = "", *, token=None):
        """Base class for all errors raised while evaluating shell input."""
        super().__init__(message)
        self.token: str = token

class YafshStackError(YafshError, IndexError):
    """Not enough items on the stack for the word."""
    pass

class YafshTypeError(YafshError, TypeError):
    """Items are present on the stack but of the wrong kind, e.g. string instead of integer."""
    pass

class YafshSyntaxError(YafshError, ValueError):
    """Closing keyword without its opener, or a loop body missing its `while`."""
    pass

class YafshLoopError(YafshError, RuntimeError):
    pass

class YafshRecursionError(YafshError, RecursionError):
    pass

class YafshExecError(YafshError, OSError):
    def __init__(self, message, *, token=None, command=None):
        super().__init__(message, token=token)
        self.command = command
