"""Convert SW2.5 monster records into Foundry VTT stat block documents."""

__version__ = "0.1.0"
