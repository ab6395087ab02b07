"""
Loadable modules for the operator console.

Each subpackage is one module: `load <name>` imports its entrypoint and
registers the CommandEntry objects listed in COMMANDS.
"""
