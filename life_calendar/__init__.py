"""Life Calendar: your life in weeks, with mortality statistics."""
