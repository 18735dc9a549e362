"""Operator CLI for the posyandu telemetry bridge.

The Typer application lives in ``cli.app`` and is not re-exported here, so
``cli.app`` keeps resolving to the module that tests patch.
"""
