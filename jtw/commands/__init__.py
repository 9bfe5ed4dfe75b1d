"""Command discovery for the jt CLI.

Every module in this package that defines ``register(app)`` contributes
commands: the function receives the root ``typer.Typer`` and attaches its
commands with ``@app.command(...)``. ``client.py`` calls each collected
registrar once at import time. Modules without ``register`` (shared helpers
such as ``menu``) are imported but add nothing.
"""
from importlib import import_module
from pathlib import Path
from pkgutil import iter_modules
from typing import Callable

import typer

Registrar = Callable[[typer.Typer], None]

registrars: list[Registrar] = []

for info in iter_modules([str(Path(__file__).parent)]):
    if info.ispkg:
        continue
    command_module = import_module(f"{__name__}.{info.name}")
    register = getattr(command_module, "register", None)
    if callable(register):
        registrars.append(register)
