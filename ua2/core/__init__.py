"""Session, encoding, paymaster and error handling core of the UA² SDK."""
