from rich.console import Console

# stdout is reserved for the capture report, everything else goes to stderr
console = Console(stderr=True, quiet=True)
