"""goldrate: live multi-source gold price feed."""
