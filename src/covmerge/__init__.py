"""covmerge — merge sharded Cobertura coverage reports into one."""

__version__ = "0.1.0"
