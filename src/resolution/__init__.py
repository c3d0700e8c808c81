"""Resolution of installed packages against lock files."""
