"""Command plugins loaded by keycraft.interface.loader at boot."""
