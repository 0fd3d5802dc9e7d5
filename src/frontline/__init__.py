"""frontline: a front controller that runs named requests as chains of commands."""

__version__ = "0.1.0"
