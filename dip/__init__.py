"""dip — bootstrap a local environment from a bundle of dotfiles and runtimes."""

__version__ = "0.1.0"
