"""Authorization core for the contractor application intake portal."""

__version__ = "0.1.0"
