"""Lock file discovery, dialect detection and parsing."""
