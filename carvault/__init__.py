"""CarVault: vehicle inventory manager."""
