"""lanwake: Wake-on-LAN gateway adapter."""

__version__ = "0.1.0"
