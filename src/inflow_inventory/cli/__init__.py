"""Command-line interface (inflow-cli).

The Typer application lives in inflow_inventory.cli.app.
"""
