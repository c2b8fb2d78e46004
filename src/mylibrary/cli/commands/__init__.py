# ABOUTME: Subcommands of the mylibrary CLI, one module per command.
# ABOUTME: Each module exposes a single click command registered in mylibrary.cli.
