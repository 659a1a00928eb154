"""Line editing, readline-style input, kernel ABI types and ELF flattening."""

__version__ = "0.1.0"