"""CLI command modules; importing one registers its command on the group."""
