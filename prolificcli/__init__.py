"""Client for the Prolific API, its response records and click commands."""

__version__ = "0.1.0"