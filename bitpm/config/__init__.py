"""Configuration module for bitpm."""

from .loader import ConfigLoader, load_bit_config, load_consumer_config, write_bit_config
from .models import BitConfig, ConsumerBitConfig

__all__ = [
    "BitConfig",
    "ConfigLoader",
    "ConsumerBitConfig",
    "load_bit_config",
    "load_consumer_config",
    "write_bit_config",
]
