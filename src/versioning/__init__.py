"""Version coercion and installed package version lookup."""
