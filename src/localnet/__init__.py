"""Local Solana test validator bootstrap for Pump.fun fixtures."""

__version__ = "0.1.0"
