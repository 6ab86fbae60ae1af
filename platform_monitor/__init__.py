"""Platform Monitor: discovers new platforms and signup bonuses and sends a ranked digest."""

__version__ = "1.0.0"
