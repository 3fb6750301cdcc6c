"""Cyclopts application and command routing for fieldchain CLI.

The CLI provides the following commands:
- check-unique: Check that records in a file are unique on a set of fields
- check-config: Validate a settings file
"""

from cyclopts import App

from fieldchain.cli import commands

app = App(
    name="fieldchain",
    help="Fluent field validation",
    version="0.1.0",
)

app.command(commands.check_unique, name="check-unique")
app.command(commands.check_config, name="check-config")
