"""Building blocks of a small Unix shell: lexing, expansion, environment, builtins and execution."""

__version__ = "0.1.0"