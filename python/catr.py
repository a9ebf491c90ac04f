#!/usr/bin/env python3
"""
Name: catr
Description: concatenate and print files
Author: Luke
License: perl
"""

import sys
import os
import argparse
from collections import namedtuple

__version__ = "0.1.0"

EX_SUCCESS = 0
EX_FAILURE = 1
EX_INTERRUPTED = 130

# Right-justified number in a six column field, then a TAB, like BSD cat.
NUMBER_FORMAT = b"%6d\t"

Config = namedtuple('Config', ['files', 'number_lines', 'number_nonblank_lines'])


class Result(namedtuple('Result', ['specifier', 'error'])):
    """Outcome of copying one input; `error` is None on success."""
    __slots__ = ()

    @property
    def ok(self):
        return self.error is None


class CatError(Exception):
    """An input that could not be copied to standard output."""

    def __init__(self, specifier: str, cause: Exception):
        super().__init__(specifier, cause)
        self.specifier = specifier
        self.cause = cause

    @property
    def reason(self) -> str:
        return getattr(self.cause, 'strerror', None) or str(self.cause)


class OpenError(CatError):
    def __str__(self):
        return f"cannot open '{self.specifier}': {self.reason}"


class ReadError(CatError):
    def __str__(self):
        return f"read error on '{self.specifier}': {self.reason}"


class LineSource:
    """
    A line-readable input. Subclasses wrap a binary stream; callers only
    use readline(), iteration, at_eof and close(), so standard input and
    regular files are handled the same way.
    """
    def __init__(self, specifier: str, stream):
        self.specifier = specifier
        self.stream = stream
        self.at_eof = False

    def readline(self) -> bytes:
        """Returns the next line with its terminator, or b'' at end of input."""
        if self.at_eof:
            return b''
        try:
            line = self.stream.readline()
        except (OSError, ValueError) as e:
            raise ReadError(self.specifier, e) from e
        if not line:
            self.at_eof = True
        return line

    def __iter__(self):
        return iter(self.readline, b'')

    def close(self):
        """Releases the input. Subclasses must override this."""
        raise NotImplementedError

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
        return False


class StdinSource(LineSource):
    """Standard input. Closing it leaves the process's stdin open."""
    def __init__(self, stream=None):
        super().__init__('-', stream if stream is not None else sys.stdin.buffer)

    def close(self):
        self.at_eof = True


class FileSource(LineSource):
    """A file opened by path; closed when the source is released."""
    def __init__(self, path: str):
        # Bytes, so nothing is decoded and only b'\n' ends a line.
        super().__init__(path, open(path, 'rb'))

    def close(self):
        self.at_eof = True
        self.stream.close()


def open_input(specifier: str, stdin=None) -> LineSource:
    """
    Resolves a specifier to a LineSource: '-' is standard input, anything
    else is a path. Raises OpenError if the path cannot be opened.
    """
    if specifier == '-':
        return StdinSource(stdin)
    try:
        return FileSource(specifier)
    except OSError as e:
        raise OpenError(specifier, e) from e


def is_blank(line: bytes) -> bool:
    """True if the line has nothing in it besides its terminator."""
    return not line.rstrip(b'\r\n')


def number_lines(lines, config: Config):
    """
    Yields each line with the prefix the numbering mode asks for. -n wins
    over -b when both are given.
    """
    line_number = 1
    for line in lines:
        if config.number_lines or (config.number_nonblank_lines and not is_blank(line)):
            yield NUMBER_FORMAT % line_number + line
            line_number += 1
        else:
            yield line


def print_lines(source: LineSource, config: Config, out=None) -> int:
    """
    Copies every line of `source` to the binary stream `out` (stdout by
    default) and closes the source. Returns the number of lines written.
    """
    out = out if out is not None else sys.stdout.buffer
    count = 0
    with source:
        for line in number_lines(source, config):
            out.write(line)
            count += 1
    return count


def cat_input(specifier: str, config: Config, stdin=None, out=None) -> Result:
    """Copies one input to standard output, returning a Result instead of raising."""
    try:
        print_lines(open_input(specifier, stdin), config, out)
    except CatError as e:
        return Result(specifier, e)
    return Result(specifier, None)


def run(config: Config, stdin=None, stdout=None, stderr=None, program_name="catr") -> list:
    """
    Copies each input in order. A failing input is reported on stderr and
    skipped; the rest are still processed.
    """
    stdout = stdout if stdout is not None else sys.stdout.buffer
    stderr = stderr if stderr is not None else sys.stderr

    results = []
    for specifier in config.files:
        result = cat_input(specifier, config, stdin, stdout)
        if not result.ok:
            stdout.flush()
            print(f"{program_name}: {result.error}", file=stderr)
        results.append(result)
    return results


def get_args(argv=None) -> Config:
    """Parses the command line into a Config."""
    parser = argparse.ArgumentParser(
        prog="catr",
        description="Concatenate and print files.",
        usage="%(prog)s [-bn] [file ...]"
    )
    parser.add_argument('-V', '--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('-n', '--number', dest='number_lines', action='store_true',
                        help='Number all output lines.')
    parser.add_argument('-b', '--number-nonblank', dest='number_nonblank_lines', action='store_true',
                        help='Number non-empty output lines (ignored with -n).')
    parser.add_argument('files', nargs='*', default=['-'], metavar='file',
                        help='Files to process. Use "-" for standard input (the default).')

    args = parser.parse_args(argv)
    return Config(
        files=tuple(args.files),
        number_lines=args.number_lines,
        number_nonblank_lines=args.number_nonblank_lines,
    )


def main(argv=None):
    """Parses arguments, copies the inputs and exits with their status."""
    config = get_args(argv)
    program_name = os.path.basename(sys.argv[0]) or "catr"

    try:
        results = run(config, program_name=program_name)
        sys.stdout.buffer.flush()
    except KeyboardInterrupt:
        sys.exit(EX_INTERRUPTED)
    except BrokenPipeError:
        # Keep the interpreter from complaining when it flushes stdout on exit.
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
        sys.exit(EX_FAILURE)

    sys.exit(EX_SUCCESS if all(r.ok for r in results) else EX_FAILURE)


if __name__ == "__main__":
    main()
