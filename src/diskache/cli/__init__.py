"""Command line interface for diskache."""
