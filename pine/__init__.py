"""pine - terminal chat assistant with an event-sourced working directory"""

__version__ = "0.1.0"
